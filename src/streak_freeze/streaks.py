"""Streak tracking for streak-freeze."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum

from streak_freeze.errors import InvalidObservation, InvalidPersistedValue

logger = logging.getLogger(__name__)

STATE_KEYS = ("current_streak", "freeze_count", "last_activity_date", "anchor_streak")


@dataclass(frozen=True)
class StreakState:
    current_streak: int = 0
    freeze_count: int = 0
    last_activity_date: date | None = None
    anchor_streak: int = 0  # streak at the most recent freeze award

    def to_profile(self) -> dict[str, str]:
        """Serialize to profile key/value strings."""
        return {
            "current_streak": str(self.current_streak),
            "freeze_count": str(self.freeze_count),
            "last_activity_date": self.last_activity_date.isoformat() if self.last_activity_date else "",
            "anchor_streak": str(self.anchor_streak),
        }


class StreakChange(Enum):
    FIRST_RUN = "first_run"
    UNCHANGED = "unchanged"
    CONTINUED = "continued"
    GAP = "gap"


@dataclass(frozen=True)
class StreakOutcome:
    kind: StreakChange
    new_streak: int
    missed_days: int = 0


def _parse_count(key: str, raw: str | None) -> int:
    """Parse a non-negative integer profile value. Missing -> 0."""
    if raw is None or raw == "":
        return 0
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise InvalidPersistedValue(key, raw) from None
    if value < 0:
        raise InvalidPersistedValue(key, raw)
    return value


def _parse_date(key: str, raw: str | None) -> date | None:
    """Parse a YYYY-MM-DD profile value. Missing -> None."""
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except (TypeError, ValueError):
        raise InvalidPersistedValue(key, raw) from None


def state_from_profile(profile: dict[str, str]) -> StreakState | None:
    """Rebuild a StreakState from profile rows.

    Returns None when no state key has ever been written. A corrupt field is
    logged and treated as absent/zero so the next reconciliation re-derives it.
    """
    if not any(key in profile for key in STATE_KEYS):
        return None

    values: dict[str, object] = {}
    for key in STATE_KEYS:
        parse = _parse_date if key == "last_activity_date" else _parse_count
        try:
            values[key] = parse(key, profile.get(key))
        except InvalidPersistedValue as exc:
            logger.warning("Discarding corrupt stored value: %s", exc)
            values[key] = None if key == "last_activity_date" else 0
    return StreakState(**values)  # type: ignore[arg-type]


def days_between(earlier: date, later: date) -> int:
    """Whole calendar days from earlier to later (negative if reversed)."""
    return (later - earlier).days


def reconcile_streak(state: StreakState, today: date, baseline: int | None = None) -> StreakOutcome:
    """Decide how the streak moves for an observation of today.

    Rules:
    - No last activity date: first run, streak seeded from baseline (or kept)
    - Same day: nothing changes
    - Previous day: streak + 1
    - Older: a gap; missed_days = gap - 1, the ledger decides the streak
    - Future last activity date: InvalidObservation
    """
    last = state.last_activity_date
    if last is None:
        seeded = state.current_streak if baseline is None else max(baseline, 0)
        return StreakOutcome(kind=StreakChange.FIRST_RUN, new_streak=seeded)

    gap = days_between(last, today)
    if gap < 0:
        raise InvalidObservation(
            f"today ({today.isoformat()}) is before last activity ({last.isoformat()})"
        )
    if gap == 0:
        return StreakOutcome(kind=StreakChange.UNCHANGED, new_streak=state.current_streak)
    if gap == 1:
        return StreakOutcome(kind=StreakChange.CONTINUED, new_streak=state.current_streak + 1)
    return StreakOutcome(kind=StreakChange.GAP, new_streak=state.current_streak, missed_days=gap - 1)
