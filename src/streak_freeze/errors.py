"""Error taxonomy for streak-freeze.

None of these are fatal: every failure degrades to "no state change, retry later".
"""
from __future__ import annotations


class StreakFreezeError(Exception):
    """Base class for all streak-freeze errors."""


class StorageUnavailable(StreakFreezeError):
    """The state store could not be read or written."""


class InvalidPersistedValue(StreakFreezeError):
    """A stored field is corrupt (non-numeric, negative, unparseable date)."""

    def __init__(self, key: str, raw: object) -> None:
        super().__init__(f"invalid stored value for {key!r}: {raw!r}")
        self.key = key
        self.raw = raw


class InvalidObservation(StreakFreezeError):
    """The observed 'today' lies before the last recorded activity date."""


class NoFreezeAvailable(StreakFreezeError):
    """A manual spend was requested with zero freezes held."""
