"""Rich terminal display for streak-freeze."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.panel import Panel

from streak_freeze.config import FreezeConfig

console = Console()

_OUTCOME_MESSAGES: dict[str, str] = {
    "first_run": "\U0001f331 Streak tracking started at {streak} days.",
    "unchanged": "Already checked in today.",
    "continued": "\U0001f525 Streak increased to {streak}!",
    "covered": "\u2744\ufe0f  {spent} freeze(s) used. Streak saved!",
    "reset": "\U0001f622 Streak lost! Fresh start.",
}


def _freeze_bar(current: int, total: int, width: int = 20) -> str:
    """Render a freeze progress bar as text: [████████░░░░░░░░░░░░]."""
    if total <= 0:
        return "[" + "\u2588" * width + "]"
    ratio = min(current / total, 1.0)
    filled = int(ratio * width)
    empty = width - filled
    return "[" + "\u2588" * filled + "\u2591" * empty + "]"


def print_status(data: dict) -> None:
    """Print streak, held freezes and next-freeze progress."""
    current_streak = data.get("current_streak", 0)
    freeze_count = data.get("freeze_count", 0)
    max_freezes = data.get("max_freezes", 0)
    next_info = data.get("next_freeze") or {}
    last_activity = data.get("last_activity_date") or "never"

    lines: list[str] = []
    lines.append("")
    lines.append(f"  \U0001f525 Streak:   [bold dark_orange3]{current_streak} days[/]")
    lines.append(f"  \u2744\ufe0f  Freezes:  [bold deep_sky_blue1]{freeze_count}/{max_freezes}[/]")
    lines.append(f"  {_freeze_bar(freeze_count, max_freezes)}")
    lines.append("")
    lines.append(f"  Next freeze:    {next_info.get('message', '-')}")
    lines.append(f"  Last check-in:  {last_activity}")
    lines.append("")

    panel = Panel(
        "\n".join(lines),
        title="[bold]STREAK FREEZE[/]",
        box=box.ROUNDED,
        border_style="cyan",
        width=50,
    )
    console.print(panel)


def print_reconcile_result(result: dict) -> None:
    """Print what a check-in did to the streak."""
    outcome = result.get("outcome", "unchanged")
    message = _OUTCOME_MESSAGES.get(outcome, outcome).format(
        streak=result.get("current_streak", 0),
        spent=result.get("freezes_spent", 0),
    )
    lines = ["", f"  {message}"]
    if result.get("freeze_awarded"):
        lines.append(
            f"  \U0001f381 New freeze earned! ({result.get('freeze_count', 0)}/{result.get('max_freezes', 0)})"
        )
    lines.append("")

    border = "red" if outcome == "reset" else "green"
    panel = Panel(
        "\n".join(lines),
        title="[bold]Check-in[/]",
        box=box.ROUNDED,
        border_style=border,
        width=50,
    )
    console.print(panel)


def print_spend_result(spent: bool, freeze_count: int, max_freezes: int) -> None:
    """Print the outcome of a manual freeze spend."""
    if spent:
        body = f"\n  \u2744\ufe0f  Freeze used manually. {freeze_count}/{max_freezes} left.\n"
        border = "blue"
    else:
        body = "\n  \U0001f6ab No freezes available.\n"
        border = "grey50"
    console.print(Panel(body, title="[bold]Use Freeze[/]", box=box.ROUNDED, border_style=border, width=50))


def print_rules(config: FreezeConfig) -> None:
    """Print how freezes are earned."""
    lines = [
        "",
        f"  After {config.days_to_first_freeze} days: 1st freeze",
        f"  After {config.days_to_second_freeze} days: 2nd freeze",
        f"  Then every {config.days_between_freezes} days: another freeze",
        f"  Maximum: {config.max_freezes} freezes",
        "",
    ]
    console.print(
        Panel("\n".join(lines), title="[bold]How it works[/]", box=box.ROUNDED, border_style="grey50", width=50)
    )


def print_settings(settings: dict[str, int | None]) -> None:
    lines = [""] + [f"  {key:<24s} {'-' if value is None else value}" for key, value in settings.items()] + [""]
    console.print(Panel("\n".join(lines), title="[bold]Settings[/]", box=box.ROUNDED, border_style="grey50", width=50))


def print_reset_result() -> None:
    console.print(
        Panel("\n  Streak state cleared.\n", title="[bold]Reset[/]", box=box.ROUNDED, border_style="yellow", width=50)
    )


def print_error(message: str) -> None:
    """Print an error panel."""
    console.print(
        Panel(f"\n  {message}\n", title="[bold red]Error[/]", box=box.ROUNDED, border_style="red", width=50)
    )
