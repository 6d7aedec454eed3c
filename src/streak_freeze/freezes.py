"""Freeze ledger: earning, spending and covering gaps with streak freezes."""

from __future__ import annotations

from dataclasses import dataclass

from streak_freeze.config import FreezeConfig
from streak_freeze.errors import NoFreezeAvailable


@dataclass(frozen=True)
class GapCoverage:
    covered: bool
    spent: int
    freeze_count: int


@dataclass(frozen=True)
class FreezeAward:
    awarded: bool
    freeze_count: int
    anchor_streak: int


@dataclass(frozen=True)
class NextFreeze:
    tier: int  # 0, 1 or 2 (2 covers every count >= 2)
    number: int  # ordinal of the freeze being worked towards
    days_remaining: int | None  # None once capped
    capped: bool

    @property
    def message(self) -> str:
        if self.capped:
            return "Maximum reached!"
        if not self.days_remaining:
            return "Freeze available!"
        unit = "day" if self.days_remaining == 1 else "days"
        return f"{self.days_remaining} {unit} until freeze #{self.number}"


def try_cover_gap(missed_days: int, freeze_count: int) -> GapCoverage:
    """Spend freezes to bridge missed days.

    Freezes are only spent when there are enough to cover every missed day;
    a failed attempt leaves the count untouched.
    """
    if missed_days <= 0:
        return GapCoverage(covered=True, spent=0, freeze_count=freeze_count)
    if freeze_count >= missed_days:
        return GapCoverage(covered=True, spent=missed_days, freeze_count=freeze_count - missed_days)
    return GapCoverage(covered=False, spent=0, freeze_count=freeze_count)


def award_threshold(freeze_count: int, anchor_streak: int, config: FreezeConfig) -> int | None:
    """Streak value needed for the next award, or None when capped."""
    if freeze_count >= config.max_freezes:
        return None
    if freeze_count == 0:
        return config.days_to_first_freeze
    if freeze_count == 1:
        return config.days_to_second_freeze
    return anchor_streak + config.days_between_freezes


def maybe_award_freeze(
    streak: int, freeze_count: int, anchor_streak: int, config: FreezeConfig
) -> FreezeAward:
    """Award at most one freeze based on the finalized streak.

    | freeze_count       | condition                                  |
    |--------------------|--------------------------------------------|
    | >= max_freezes     | never (capped)                             |
    | 0                  | streak >= days_to_first_freeze             |
    | 1                  | streak >= days_to_second_freeze            |
    | >= 2               | streak >= anchor + days_between_freezes    |
    """
    threshold = award_threshold(freeze_count, anchor_streak, config)
    if threshold is None or streak < threshold:
        return FreezeAward(awarded=False, freeze_count=freeze_count, anchor_streak=anchor_streak)
    return FreezeAward(
        awarded=True,
        freeze_count=min(freeze_count + 1, config.max_freezes),
        anchor_streak=streak,
    )


def spend_one(freeze_count: int) -> int:
    """Manually consume one freeze. Raises NoFreezeAvailable at zero."""
    if freeze_count <= 0:
        raise NoFreezeAvailable("No streak freezes available")
    return freeze_count - 1


def next_freeze(streak: int, freeze_count: int, anchor_streak: int, config: FreezeConfig) -> NextFreeze:
    """Project how far the user is from the next award."""
    tier = min(freeze_count, 2)
    threshold = award_threshold(freeze_count, anchor_streak, config)
    if threshold is None:
        return NextFreeze(tier=tier, number=freeze_count + 1, days_remaining=None, capped=True)
    return NextFreeze(
        tier=tier,
        number=freeze_count + 1,
        days_remaining=max(threshold - streak, 0),
        capped=False,
    )
