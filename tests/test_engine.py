"""Tests for reconciliation: streak tracker and freeze ledger combined."""

from datetime import date, timedelta

import pytest

from streak_freeze.config import FreezeConfig
from streak_freeze.engine import Outcome, normalize, reconcile, spend_freeze
from streak_freeze.errors import InvalidObservation, NoFreezeAvailable
from streak_freeze.streaks import StreakState

DEFAULT = FreezeConfig()
DAY = date(2026, 3, 10)


def _run_days(state, start, days, config=DEFAULT):
    """Reconcile once per consecutive day, returning every intermediate state."""
    states = []
    for offset in range(days):
        state = reconcile(state, start + timedelta(days=offset), config).state
        states.append(state)
    return states


class TestFirstRun:
    def test_absent_state_created(self):
        result = reconcile(None, DAY, DEFAULT)
        assert result.outcome is Outcome.FIRST_RUN
        assert result.state == StreakState(current_streak=0, freeze_count=0, last_activity_date=DAY)
        assert result.changed is True

    def test_baseline_seeds_streak(self):
        result = reconcile(None, DAY, DEFAULT, baseline=2)
        assert result.state.current_streak == 2

    def test_baseline_can_earn_freeze(self):
        result = reconcile(None, DAY, DEFAULT, baseline=4)
        assert result.freeze_awarded is True
        assert result.state.freeze_count == 1
        assert result.state.anchor_streak == 4


class TestScenarios:
    def test_growth_and_first_award(self):
        start = DAY
        state = reconcile(None, start, DEFAULT).state
        states = _run_days(state, start + timedelta(days=1), 3)
        assert [s.current_streak for s in states] == [1, 2, 3]
        assert states[1].freeze_count == 0
        assert states[2].freeze_count == 1
        assert states[2].anchor_streak == 3

    def test_second_award(self):
        state = StreakState(current_streak=6, freeze_count=1, last_activity_date=DAY, anchor_streak=3)
        result = reconcile(state, DAY + timedelta(days=1), DEFAULT)
        assert result.state.current_streak == 7
        assert result.state.freeze_count == 2
        assert result.state.anchor_streak == 7

    def test_tiered_award(self):
        state = StreakState(current_streak=7, freeze_count=2, last_activity_date=DAY, anchor_streak=7)
        states = _run_days(state, DAY + timedelta(days=1), 3)
        assert [s.freeze_count for s in states] == [2, 2, 3]
        assert states[-1].current_streak == 10
        assert states[-1].anchor_streak == 10

    def test_gap_covered(self):
        state = StreakState(current_streak=5, freeze_count=1, last_activity_date=DAY - timedelta(days=2))
        result = reconcile(state, DAY, DEFAULT)
        assert result.outcome is Outcome.COVERED
        assert result.missed_days == 1
        assert result.freezes_spent == 1
        assert result.state.freeze_count == 0
        assert result.state.current_streak == 6

    def test_gap_not_covered(self):
        state = StreakState(current_streak=5, freeze_count=0, last_activity_date=DAY - timedelta(days=3))
        result = reconcile(state, DAY, DEFAULT)
        assert result.outcome is Outcome.RESET
        assert result.missed_days == 2
        assert result.state.current_streak == 1
        assert result.state.freeze_count == 0

    def test_partial_freezes_not_spent_on_reset(self):
        state = StreakState(current_streak=9, freeze_count=2, last_activity_date=DAY - timedelta(days=4), anchor_streak=7)
        result = reconcile(state, DAY, DEFAULT)
        assert result.outcome is Outcome.RESET
        assert result.state.freeze_count == 2
        assert result.state.anchor_streak == 7

    def test_cap_reached(self):
        state = StreakState(current_streak=20, freeze_count=5, last_activity_date=DAY, anchor_streak=17)
        states = _run_days(state, DAY + timedelta(days=1), 10)
        assert all(s.freeze_count == 5 for s in states)
        assert states[-1].anchor_streak == 17


class TestOrdering:
    def test_reset_streak_does_not_earn(self):
        # Pre-check streak would qualify; the reset streak of 1 must not.
        state = StreakState(current_streak=2, freeze_count=0, last_activity_date=DAY - timedelta(days=5))
        result = reconcile(state, DAY, DEFAULT)
        assert result.freeze_awarded is False
        assert result.state.freeze_count == 0

    def test_covered_streak_can_earn(self):
        state = StreakState(current_streak=6, freeze_count=1, last_activity_date=DAY - timedelta(days=2), anchor_streak=3)
        result = reconcile(state, DAY, DEFAULT)
        # spend 1 -> 0 freezes, streak 7 >= first threshold
        assert result.state.current_streak == 7
        assert result.freeze_awarded is True
        assert result.state.freeze_count == 1
        assert result.state.anchor_streak == 7

    def test_anchor_unchanged_by_coverage(self):
        state = StreakState(current_streak=8, freeze_count=4, last_activity_date=DAY - timedelta(days=3), anchor_streak=8)
        result = reconcile(state, DAY, DEFAULT)
        assert result.outcome is Outcome.COVERED
        assert result.state.freeze_count == 2
        assert result.state.anchor_streak == 8


class TestIdempotenceAndInvariants:
    def test_same_day_twice(self):
        first = reconcile(StreakState(current_streak=3, last_activity_date=DAY - timedelta(days=1)), DAY, DEFAULT)
        second = reconcile(first.state, DAY, DEFAULT)
        assert second.outcome is Outcome.UNCHANGED
        assert second.changed is False
        assert second.state == first.state

    def test_invalid_observation(self):
        state = StreakState(current_streak=3, last_activity_date=DAY)
        with pytest.raises(InvalidObservation):
            reconcile(state, DAY - timedelta(days=1), DEFAULT)

    def test_anchor_monotonic_over_long_run(self):
        states = _run_days(reconcile(None, DAY, DEFAULT).state, DAY + timedelta(days=1), 40)
        anchors = [s.anchor_streak for s in states]
        assert anchors == sorted(anchors)

    @pytest.mark.parametrize("gap_pattern", [[1, 1, 3, 1, 5, 1, 1, 1, 2, 9, 1, 1, 1, 1, 1, 1, 1, 2]])
    def test_invariants_hold_on_mixed_history(self, gap_pattern):
        config = FreezeConfig(days_to_first_freeze=2, days_to_second_freeze=4, days_between_freezes=2, max_freezes=3)
        state = reconcile(None, DAY, config).state
        today = DAY
        for gap in gap_pattern:
            today += timedelta(days=gap)
            state = reconcile(state, today, config).state
            assert 0 <= state.freeze_count <= config.max_freezes
            assert state.current_streak >= 0
            assert state.last_activity_date == today

    def test_normalize_clamps_lowered_max(self):
        state = StreakState(current_streak=4, freeze_count=5, last_activity_date=DAY)
        clamped = normalize(state, FreezeConfig(max_freezes=2))
        assert clamped.freeze_count == 2

    def test_same_day_with_lowered_max_reports_change(self):
        state = StreakState(current_streak=4, freeze_count=5, last_activity_date=DAY)
        result = reconcile(state, DAY, FreezeConfig(max_freezes=2))
        assert result.outcome is Outcome.UNCHANGED
        assert result.changed is True
        assert result.state.freeze_count == 2


class TestSpendFreeze:
    def test_spend_leaves_anchor(self):
        state = StreakState(current_streak=10, freeze_count=3, last_activity_date=DAY, anchor_streak=10)
        updated = spend_freeze(state)
        assert updated.freeze_count == 2
        assert updated.anchor_streak == 10
        assert updated.current_streak == 10

    def test_spend_with_none(self):
        with pytest.raises(NoFreezeAvailable):
            spend_freeze(StreakState())
