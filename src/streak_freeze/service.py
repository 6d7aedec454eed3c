"""Async streak service: store + clock + config around the reconciliation engine.

All state-changing calls run read -> compute -> write under one asyncio.Lock.
A call that finds the lock held is skipped (returns None) rather than queued.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, Protocol

from streak_freeze.config import BASELINE_STREAK, FreezeConfig, get_setting, load_freeze_config
from streak_freeze.engine import Outcome, ReconcileResult, normalize, reconcile, spend_freeze
from streak_freeze.errors import InvalidObservation, NoFreezeAvailable
from streak_freeze.freezes import NextFreeze, next_freeze
from streak_freeze.streaks import StreakState

logger = logging.getLogger(__name__)


class StateStore(Protocol):
    async def read(self) -> StreakState | None: ...

    async def write(self, state: StreakState) -> None: ...

    async def clear(self) -> None: ...


class Clock(Protocol):
    def today(self) -> date: ...


class BaselineSource(Protocol):
    def external_streak(self) -> int | None: ...


class SystemClock:
    def today(self) -> date:
        return date.today()


class ConfigBaseline:
    """Baseline streak read from the ``baseline-streak`` setting."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path = config_path

    def external_streak(self) -> int | None:
        return get_setting(BASELINE_STREAK, self.config_path)


class FixedBaseline:
    def __init__(self, value: int | None) -> None:
        self.value = value

    def external_streak(self) -> int | None:
        return self.value


@dataclass(frozen=True)
class StreakStatus:
    current_streak: int
    freeze_count: int
    max_freezes: int
    next_freeze: NextFreeze
    last_activity_date: date | None = None

    def to_dict(self) -> dict:
        return {
            "current_streak": self.current_streak,
            "freeze_count": self.freeze_count,
            "max_freezes": self.max_freezes,
            "last_activity_date": self.last_activity_date.isoformat() if self.last_activity_date else None,
            "next_freeze": {
                "days_remaining": self.next_freeze.days_remaining,
                "capped": self.next_freeze.capped,
                "message": self.next_freeze.message,
            },
        }


@dataclass(frozen=True)
class SpendResult:
    spent: bool
    status: StreakStatus


Listener = Callable[[StreakStatus], None]


class StreakService:
    """Entry point used by the CLI, scheduler and MCP server."""

    def __init__(
        self,
        store: StateStore,
        clock: Clock | None = None,
        config_provider: Callable[[], FreezeConfig] | None = None,
        baseline: BaselineSource | None = None,
    ) -> None:
        self.store = store
        self.clock = clock or SystemClock()
        self.config_provider = config_provider or load_freeze_config
        self.baseline = baseline
        self._lock = asyncio.Lock()
        self._listeners: list[Listener] = []

    # ── Notifications ────────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback for state changes. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, status: StreakStatus) -> None:
        for listener in list(self._listeners):
            try:
                listener(status)
            except Exception:
                logger.exception("Streak listener %r failed", listener)

    def _status_for(self, state: StreakState, config: FreezeConfig) -> StreakStatus:
        return StreakStatus(
            current_streak=state.current_streak,
            freeze_count=state.freeze_count,
            max_freezes=config.max_freezes,
            next_freeze=next_freeze(state.current_streak, state.freeze_count, state.anchor_streak, config),
            last_activity_date=state.last_activity_date,
        )

    # ── Operations ───────────────────────────────────────────────────────────

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def reconcile(self, today: date | None = None) -> ReconcileResult | None:
        """Reconcile the stored state against today. None if another call is in flight."""
        if self._lock.locked():
            logger.debug("Reconciliation already in flight; skipping")
            return None
        async with self._lock:
            observed = today or self.clock.today()
            config = self.config_provider()
            stored = await self.store.read()
            baseline = None
            if stored is None and self.baseline is not None:
                baseline = self.baseline.external_streak()
            try:
                result = reconcile(stored, observed, config, baseline)
            except InvalidObservation as exc:
                logger.warning("Ignoring observation: %s", exc)
                current = normalize(stored or StreakState(), config)
                return ReconcileResult(state=current, outcome=Outcome.UNCHANGED, changed=False)

            if not result.changed:
                return result

            await self.store.write(result.state)
            if result.outcome is Outcome.COVERED:
                logger.info("Spent %d freeze(s) to cover %d missed day(s)", result.freezes_spent, result.missed_days)
            elif result.outcome is Outcome.RESET:
                logger.info("Streak reset after %d missed day(s)", result.missed_days)
            if result.freeze_awarded:
                logger.info(
                    "Freeze awarded at streak %d (now %d/%d)",
                    result.state.current_streak, result.state.freeze_count, config.max_freezes,
                )
            self._notify(self._status_for(result.state, config))
            return result

    async def spend_one_freeze(self) -> SpendResult | None:
        """Manually consume one freeze. None if a reconciliation is in flight."""
        if self._lock.locked():
            logger.debug("Reconciliation in flight; skipping manual spend")
            return None
        async with self._lock:
            config = self.config_provider()
            current = normalize(await self.store.read() or StreakState(), config)
            try:
                updated = spend_freeze(current)
            except NoFreezeAvailable:
                logger.info("Manual spend requested with no freezes available")
                return SpendResult(spent=False, status=self._status_for(current, config))
            await self.store.write(updated)
            logger.info("Manually spent one freeze (%d left)", updated.freeze_count)
            status = self._status_for(updated, config)
            self._notify(status)
            return SpendResult(spent=True, status=status)

    async def reset(self) -> StreakStatus:
        """Zero all persisted fields; the next reconciliation is a first run."""
        async with self._lock:
            await self.store.clear()
            logger.info("Streak state reset")
            status = self._status_for(StreakState(), self.config_provider())
            self._notify(status)
            return status

    async def status(self) -> StreakStatus:
        """Read-only projection for display."""
        config = self.config_provider()
        state = normalize(await self.store.read() or StreakState(), config)
        return self._status_for(state, config)
