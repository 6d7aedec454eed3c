"""Configuration file management for streak-freeze.

Reads and writes ~/.streak-freeze/config.json. Setting ids match the ones the
freeze widget registers (e.g. ``max-streak-freezes``).
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

DEFAULT_CONFIG_PATH: Path = Path.home() / ".streak-freeze" / "config.json"

DAYS_TO_FIRST_FREEZE = "days-to-first-freeze"
DAYS_TO_SECOND_FREEZE = "days-to-second-freeze"
DAYS_BETWEEN_FREEZES = "days-between-freezes"
MAX_STREAK_FREEZES = "max-streak-freezes"
CHECK_INTERVAL_SECONDS = "check-interval-seconds"
BASELINE_STREAK = "baseline-streak"

DEFAULTS: dict[str, int] = {
    DAYS_TO_FIRST_FREEZE: 3,
    DAYS_TO_SECOND_FREEZE: 7,
    DAYS_BETWEEN_FREEZES: 3,
    MAX_STREAK_FREEZES: 5,
    CHECK_INTERVAL_SECONDS: 300,
}

# baseline-streak may be 0; everything else must be positive
SETTING_IDS: tuple[str, ...] = tuple(DEFAULTS) + (BASELINE_STREAK,)


@dataclass(frozen=True)
class FreezeConfig:
    days_to_first_freeze: int = 3
    days_to_second_freeze: int = 7
    days_between_freezes: int = 3
    max_freezes: int = 5


def load_config(config_path: Path | None = None) -> dict:
    """Load config from JSON file. Returns {} if file missing or invalid."""
    path = config_path or DEFAULT_CONFIG_PATH
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict, config_path: Path | None = None) -> None:
    """Write config dict to JSON file. Creates parent dirs if needed."""
    path = config_path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def _as_int(raw: object, minimum: int) -> int | None:
    if isinstance(raw, bool):
        return None
    try:
        value = int(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if isinstance(raw, float) and raw != value:
        return None
    return value if value >= minimum else None


def get_setting(setting_id: str, config_path: Path | None = None) -> int | None:
    """Return a stored integer setting, or None if absent or invalid."""
    config = load_config(config_path)
    if setting_id not in config:
        return None
    minimum = 0 if setting_id == BASELINE_STREAK else 1
    return _as_int(config[setting_id], minimum)


def get_setting_or_default(setting_id: str, config_path: Path | None = None) -> int:
    """Return a setting, falling back to the documented default."""
    value = get_setting(setting_id, config_path)
    return DEFAULTS[setting_id] if value is None else value


def set_setting(setting_id: str, value: int, config_path: Path | None = None) -> None:
    """Validate and persist a single setting.

    Raises ValueError for unknown ids or out-of-range values.
    """
    if setting_id not in SETTING_IDS:
        raise ValueError(f"Unknown setting: {setting_id}")
    minimum = 0 if setting_id == BASELINE_STREAK else 1
    parsed = _as_int(value, minimum)
    if parsed is None:
        raise ValueError(f"{setting_id} must be an integer >= {minimum}")
    config = load_config(config_path)
    config[setting_id] = parsed
    save_config(config, config_path)


def load_freeze_config(config_path: Path | None = None) -> FreezeConfig:
    """Build the freeze thresholds from the config file."""
    return FreezeConfig(
        days_to_first_freeze=get_setting_or_default(DAYS_TO_FIRST_FREEZE, config_path),
        days_to_second_freeze=get_setting_or_default(DAYS_TO_SECOND_FREEZE, config_path),
        days_between_freezes=get_setting_or_default(DAYS_BETWEEN_FREEZES, config_path),
        max_freezes=get_setting_or_default(MAX_STREAK_FREEZES, config_path),
    )
