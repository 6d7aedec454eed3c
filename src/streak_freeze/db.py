"""SQLite database layer for streak-freeze."""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from pathlib import Path

from streak_freeze.errors import StorageUnavailable
from streak_freeze.streaks import STATE_KEYS, StreakState, state_from_profile

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".streak-freeze" / "data.db"


class Database:
    """SQLite database manager with WAL mode."""

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path or DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(self.db_path))
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL")
        self.init_db()

    def init_db(self) -> None:
        """Create tables if they do not exist."""
        self.conn.executescript("""
            CREATE TABLE IF NOT EXISTS profile (
                key TEXT PRIMARY KEY,
                value TEXT
            );
        """)
        self.conn.commit()

    def set_profile_many(self, values: dict[str, str]) -> None:
        """Upsert several profile values in one transaction."""
        with self.conn:
            self.conn.executemany(
                "INSERT INTO profile (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                [(k, str(v)) for k, v in values.items()],
            )

    def delete_profile(self, *keys: str) -> None:
        """Remove profile rows."""
        with self.conn:
            self.conn.executemany("DELETE FROM profile WHERE key = ?", [(k,) for k in keys])

    def get_all_profile(self) -> dict[str, str]:
        """Return all profile key-value pairs as a dict."""
        rows = self.conn.execute("SELECT key, value FROM profile").fetchall()
        return {row["key"]: row["value"] for row in rows}

    def close(self) -> None:
        """Close the database connection."""
        self.conn.close()


class SqliteStateStore:
    """Async state store persisting StreakState in the profile table.

    Each call opens its own connection in a worker thread; sqlite3 connections
    are bound to the thread that created them.
    """

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path or DEFAULT_DB_PATH

    def _read_sync(self) -> StreakState | None:
        db = Database(self.db_path)
        try:
            return state_from_profile(db.get_all_profile())
        finally:
            db.close()

    def _write_sync(self, state: StreakState) -> None:
        db = Database(self.db_path)
        try:
            db.set_profile_many(state.to_profile())
        finally:
            db.close()

    def _clear_sync(self) -> None:
        db = Database(self.db_path)
        try:
            db.delete_profile(*STATE_KEYS)
        finally:
            db.close()

    async def read(self) -> StreakState | None:
        try:
            return await asyncio.to_thread(self._read_sync)
        except (sqlite3.Error, OSError) as exc:
            logger.error("State read failed: %s", exc)
            raise StorageUnavailable(f"could not read state: {exc}") from exc

    async def write(self, state: StreakState) -> None:
        try:
            await asyncio.to_thread(self._write_sync, state)
        except (sqlite3.Error, OSError) as exc:
            logger.error("State write failed: %s", exc)
            raise StorageUnavailable(f"could not write state: {exc}") from exc

    async def clear(self) -> None:
        try:
            await asyncio.to_thread(self._clear_sync)
        except (sqlite3.Error, OSError) as exc:
            logger.error("State clear failed: %s", exc)
            raise StorageUnavailable(f"could not clear state: {exc}") from exc
