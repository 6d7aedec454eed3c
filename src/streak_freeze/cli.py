"""CLI commands for streak-freeze."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from streak_freeze.config import (
    CHECK_INTERVAL_SECONDS,
    DEFAULTS,
    SETTING_IDS,
    get_setting,
    get_setting_or_default,
    load_freeze_config,
    set_setting,
)
from streak_freeze.db import SqliteStateStore
from streak_freeze.display import (
    print_error,
    print_reconcile_result,
    print_reset_result,
    print_rules,
    print_settings,
    print_spend_result,
    print_status,
)
from streak_freeze.errors import StorageUnavailable
from streak_freeze.logging_setup import setup_logger
from streak_freeze.scheduler import ReconcileScheduler
from streak_freeze.service import ConfigBaseline, FixedBaseline, StreakService


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="streak-freeze",
        description="Keep your daily streak alive with earnable freezes",
    )
    parser.add_argument("--db", default=None, help="Path to the state database")
    parser.add_argument("--config", default=None, help="Path to config.json")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("status", help="Show streak and freezes")
    check_parser = subparsers.add_parser("check", help="Check in for today")
    check_parser.add_argument("--baseline", type=int, default=None, help="Starting streak on first run")
    subparsers.add_parser("use-freeze", help="Spend one freeze manually")
    subparsers.add_parser("reset", help="Clear all streak state")
    watch_parser = subparsers.add_parser("watch", help="Check in periodically")
    watch_parser.add_argument("--interval", "-i", type=float, default=None, help="Seconds between checks")
    cfg_parser = subparsers.add_parser("config", help="Show or change settings")
    cfg_sub = cfg_parser.add_subparsers(dest="cfg_command")
    cfg_sub.add_parser("show", help="Show effective settings")
    cfg_set_p = cfg_sub.add_parser("set", help="Change a setting")
    cfg_set_p.add_argument("setting", choices=SETTING_IDS)
    cfg_set_p.add_argument("value", type=int)
    return parser


def build_service(
    db_path: Path | None = None,
    config_path: Path | None = None,
    baseline: int | None = None,
) -> StreakService:
    """Wire the SQLite store and JSON config into a StreakService."""
    source = FixedBaseline(baseline) if baseline is not None else ConfigBaseline(config_path)
    return StreakService(
        SqliteStateStore(db_path),
        config_provider=lambda: load_freeze_config(config_path),
        baseline=source,
    )


def main() -> None:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args()
    command = args.command or "status"
    db_path = Path(args.db) if args.db else None
    config_path = Path(args.config) if args.config else None

    setup_logger()
    service = build_service(db_path, config_path, baseline=getattr(args, "baseline", None))

    try:
        if command == "status":
            do_status(service, config_path)
        elif command == "check":
            do_check(service)
        elif command == "use-freeze":
            do_use_freeze(service)
        elif command == "reset":
            do_reset(service)
        elif command == "watch":
            do_watch(service, interval=args.interval, config_path=config_path)
        elif command == "config":
            if getattr(args, "cfg_command", None) == "set":
                do_config_set(args.setting, args.value, config_path)
            else:
                do_config_show(config_path)
    except StorageUnavailable as exc:
        print_error(f"Storage unavailable: {exc}")
        sys.exit(1)


def do_status(service: StreakService, config_path: Path | None = None) -> dict:
    """Show streak, freezes and how the next freeze is earned."""
    data = asyncio.run(service.status()).to_dict()
    print_status(data)
    print_rules(load_freeze_config(config_path))
    return data


def do_check(service: StreakService) -> dict:
    """Reconcile today's check-in and report what changed."""
    result = asyncio.run(service.reconcile())
    if result is None:
        return {"skipped": True}
    config = service.config_provider()
    data = {
        "skipped": False,
        "outcome": result.outcome.value,
        "changed": result.changed,
        "current_streak": result.state.current_streak,
        "freeze_count": result.state.freeze_count,
        "max_freezes": config.max_freezes,
        "missed_days": result.missed_days,
        "freezes_spent": result.freezes_spent,
        "freeze_awarded": result.freeze_awarded,
    }
    print_reconcile_result(data)
    return data


def do_use_freeze(service: StreakService) -> dict:
    """Spend one freeze by hand."""
    result = asyncio.run(service.spend_one_freeze())
    if result is None:
        return {"skipped": True}
    print_spend_result(result.spent, result.status.freeze_count, result.status.max_freezes)
    return {"skipped": False, "spent": result.spent, "freeze_count": result.status.freeze_count}


def do_reset(service: StreakService) -> dict:
    """Clear all stored streak state."""
    status = asyncio.run(service.reset())
    print_reset_result()
    return status.to_dict()


def do_watch(
    service: StreakService,
    interval: float | None = None,
    config_path: Path | None = None,
) -> None:
    """Reconcile on a timer until interrupted."""
    seconds = interval or get_setting_or_default(CHECK_INTERVAL_SECONDS, config_path)
    scheduler = ReconcileScheduler(service, interval=seconds)
    service.subscribe(lambda status: print_status(status.to_dict()))
    try:
        asyncio.run(scheduler.run_forever())
    except KeyboardInterrupt:
        pass


def do_config_show(config_path: Path | None = None) -> dict[str, int | None]:
    """Show effective settings (stored value or default)."""
    settings: dict[str, int | None] = {}
    for setting_id in SETTING_IDS:
        value = get_setting(setting_id, config_path)
        settings[setting_id] = DEFAULTS.get(setting_id) if value is None else value
    print_settings(settings)
    return settings


def do_config_set(setting_id: str, value: int, config_path: Path | None = None) -> bool:
    """Persist a setting; prints an error for invalid values."""
    try:
        set_setting(setting_id, value, config_path)
    except ValueError as exc:
        print_error(str(exc))
        return False
    do_config_show(config_path)
    return True


if __name__ == "__main__":
    main()
