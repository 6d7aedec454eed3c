"""Reconciliation: one atomic streak/freeze state transition per observed day."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum

from streak_freeze.config import FreezeConfig
from streak_freeze.freezes import maybe_award_freeze, spend_one, try_cover_gap
from streak_freeze.streaks import StreakChange, StreakState, reconcile_streak


class Outcome(Enum):
    FIRST_RUN = "first_run"
    UNCHANGED = "unchanged"
    CONTINUED = "continued"
    COVERED = "covered"
    RESET = "reset"


@dataclass(frozen=True)
class ReconcileResult:
    state: StreakState
    outcome: Outcome
    missed_days: int = 0
    freezes_spent: int = 0
    freeze_awarded: bool = False
    changed: bool = True


def normalize(state: StreakState, config: FreezeConfig) -> StreakState:
    """Clamp counters into their valid ranges (max_freezes may have been lowered)."""
    freeze_count = min(max(state.freeze_count, 0), config.max_freezes)
    return replace(
        state,
        current_streak=max(state.current_streak, 0),
        freeze_count=freeze_count,
        anchor_streak=max(state.anchor_streak, 0),
    )


def reconcile(
    state: StreakState | None,
    today: date,
    config: FreezeConfig,
    baseline: int | None = None,
) -> ReconcileResult:
    """Compute the new state for an observation of today.

    Award evaluation always sees the post-gap streak, so a freeze is never
    earned on a streak that is being reset. Raises InvalidObservation when
    today precedes the last activity date.
    """
    stored = state or StreakState()
    current = normalize(stored, config)
    step = reconcile_streak(current, today, baseline)

    if step.kind is StreakChange.UNCHANGED:
        return ReconcileResult(state=current, outcome=Outcome.UNCHANGED, changed=current != stored)

    freeze_count = current.freeze_count
    spent = 0
    if step.kind is StreakChange.FIRST_RUN:
        outcome = Outcome.FIRST_RUN
        streak = step.new_streak
    elif step.kind is StreakChange.CONTINUED:
        outcome = Outcome.CONTINUED
        streak = step.new_streak
    else:
        coverage = try_cover_gap(step.missed_days, freeze_count)
        if coverage.covered:
            outcome = Outcome.COVERED
            streak = step.new_streak + 1
            spent = coverage.spent
            freeze_count = coverage.freeze_count
        else:
            outcome = Outcome.RESET
            streak = 1

    award = maybe_award_freeze(streak, freeze_count, current.anchor_streak, config)
    new_state = StreakState(
        current_streak=streak,
        freeze_count=award.freeze_count,
        last_activity_date=today,
        anchor_streak=award.anchor_streak,
    )
    return ReconcileResult(
        state=new_state,
        outcome=outcome,
        missed_days=step.missed_days,
        freezes_spent=spent,
        freeze_awarded=award.awarded,
        changed=new_state != stored,
    )


def spend_freeze(state: StreakState) -> StreakState:
    """Manual freeze consumption; independent of awards and the anchor."""
    return replace(state, freeze_count=spend_one(state.freeze_count))
