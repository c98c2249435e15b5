"""
Conversation log repository
===========================
- One SQLite file per session holding a single append-only ``chat_log`` table.
- Turns are never updated or deleted.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from dataclasses import dataclass
from typing import Literal

from recall_agent.memory.rag.sql import db

logger = logging.getLogger(__name__)

Role = Literal["user", "assistant"]

_SCHEMA = """
    CREATE TABLE IF NOT EXISTS chat_log (
      id INTEGER PRIMARY KEY AUTOINCREMENT,
      role TEXT NOT NULL,
      content TEXT NOT NULL,
      ts INTEGER NOT NULL DEFAULT (CAST(strftime('%s', 'now') AS INTEGER))
    )
"""


@dataclass(frozen=True, slots=True)
class Turn:
    """One persisted message in a session's log."""

    id: int
    role: Role
    content: str
    timestamp: int

    def to_message(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


def _row_to_turn(row: sqlite3.Row) -> Turn:
    return Turn(id=int(row["id"]), role=row["role"], content=row["content"], timestamp=int(row["ts"]))


class ConversationLog:
    """Async helpers for a session's ``chat_log`` table."""

    def __init__(self, path: str, lock: asyncio.Lock | None = None):
        self.path = path
        self._conn: sqlite3.Connection | None = None
        self._lock = lock or asyncio.Lock()

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = db.connect(self.path)
        return self._conn

    async def ensure_schema(self) -> None:
        """Create the ``chat_log`` table if it does not exist yet."""

        def _run():
            conn = self._connection()
            with conn:
                conn.execute(_SCHEMA)

        async with self._lock:
            await asyncio.to_thread(_run)

    async def append(self, role: Role, content: str) -> Turn:
        """
        Append a turn and return it as persisted.

        :param role: ``"user"`` or ``"assistant"``.
        :param content: Message text.
        :raises sqlite3.Error: When the write fails.
        """
        def _run() -> Turn:
            conn = self._connection()
            with conn:
                cur = conn.execute(
                    "INSERT INTO chat_log (role, content) VALUES (?, ?)", (role, content)
                )
                row = conn.execute(
                    "SELECT id, role, content, ts FROM chat_log WHERE id=?", (cur.lastrowid,)
                ).fetchone()
            return _row_to_turn(row)

        async with self._lock:
            turn = await asyncio.to_thread(_run)  # blocking sqlite call
        logger.debug("Appended %s turn %d to %s", turn.role, turn.id, self.path)
        return turn

    async def recent(self, limit: int) -> tuple[Turn, ...]:
        """Return up to ``limit`` most recent turns, oldest first."""
        sql = """
            SELECT id, role, content, ts FROM (
              SELECT id, role, content, ts FROM chat_log ORDER BY id DESC LIMIT ?
            ) ORDER BY id ASC
        """
        def _query():
            return self._connection().execute(sql, (max(0, int(limit)),)).fetchall()

        async with self._lock:
            rows = await asyncio.to_thread(_query)  # blocking sqlite call
        return tuple(_row_to_turn(r) for r in rows)

    async def latest(self, limit: int) -> tuple[Turn, ...]:
        """Return up to ``limit`` most recent turns, newest first."""
        sql = "SELECT id, role, content, ts FROM chat_log ORDER BY id DESC LIMIT ?"

        def _query():
            return self._connection().execute(sql, (max(0, int(limit)),)).fetchall()

        async with self._lock:
            rows = await asyncio.to_thread(_query)  # blocking sqlite call
        return tuple(_row_to_turn(r) for r in rows)

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
