"""
Repositories (SQL-only)
=======================
- Durable bookkeeping for ingestion workflows and their step journal.
- No embedding or vector logic here; pure CRUD and selects.
"""

from __future__ import annotations
from typing import Any, List, Optional, Sequence
import asyncio
import json
import sqlite3
import time

MISSING = object()


class WorkflowRepo:
    """Async CRUD helpers for the ``workflows`` and ``workflow_steps`` tables."""

    def __init__(self, conn: sqlite3.Connection, lock: asyncio.Lock):
        self.conn = conn
        self._lock = lock

    async def create(self, workflow_id: str, doc_id: str, text: str) -> None:
        """Record a new ``queued`` workflow."""
        sql = """
            INSERT INTO workflows (id, doc_id, text, status, created_ts, updated_ts)
            VALUES (?, ?, ?, 'queued', ?, ?)
        """
        now = time.time()

        def _run():
            with self.conn:
                self.conn.execute(sql, (workflow_id, doc_id, text, now, now))

        async with self._lock:
            await asyncio.to_thread(_run)  # blocking sqlite call

    async def set_status(
        self,
        workflow_id: str,
        status: str,
        *,
        chunk_count: Optional[int] = None,
        failed: Optional[Sequence[int]] = None,
        error: Optional[str] = None,
    ) -> None:
        """Update status (and optionally the outcome columns) of a workflow."""
        sql = """
            UPDATE workflows
            SET status=?,
                chunk_count=COALESCE(?, chunk_count),
                failed=COALESCE(?, failed),
                error=?,
                updated_ts=?
            WHERE id=?
        """
        failed_json = json.dumps(list(failed)) if failed is not None else None

        def _run():
            with self.conn:
                self.conn.execute(
                    sql, (status, chunk_count, failed_json, error, time.time(), workflow_id)
                )

        async with self._lock:
            await asyncio.to_thread(_run)

    async def get(self, workflow_id: str) -> Optional[dict[str, Any]]:
        """Return the workflow row as a dict, or ``None``."""
        sql = """
            SELECT id, doc_id, status, chunk_count, failed, error, created_ts, updated_ts
            FROM workflows WHERE id=?
        """

        def _query():
            return self.conn.execute(sql, (workflow_id,)).fetchone()

        async with self._lock:
            row = await asyncio.to_thread(_query)
        if row is None:
            return None
        data = dict(row)
        data["failed"] = json.loads(data["failed"]) if data["failed"] else []
        return data

    async def pending(self) -> List[tuple[str, str, str]]:
        """Return ``(id, doc_id, text)`` for workflows that never finished."""
        sql = """
            SELECT id, doc_id, text FROM workflows
            WHERE status IN ('queued', 'running')
            ORDER BY created_ts ASC
        """

        def _query():
            return self.conn.execute(sql).fetchall()

        async with self._lock:
            rows = await asyncio.to_thread(_query)
        return [(r["id"], r["doc_id"], r["text"]) for r in rows]

    async def step_result(self, workflow_id: str, name: str) -> Any:
        """Return the recorded result of a step, or ``MISSING``."""
        sql = "SELECT result FROM workflow_steps WHERE workflow_id=? AND name=?"

        def _query():
            return self.conn.execute(sql, (workflow_id, name)).fetchone()

        async with self._lock:
            row = await asyncio.to_thread(_query)
        return MISSING if row is None else json.loads(row["result"])

    async def record_step(self, workflow_id: str, name: str, result: Any, attempts: int) -> None:
        """Persist a completed step's JSON-serializable ``result``."""
        sql = """
            INSERT INTO workflow_steps (workflow_id, name, result, attempts, ts)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(workflow_id, name) DO UPDATE SET
              result=excluded.result,
              attempts=excluded.attempts,
              ts=excluded.ts
        """
        payload = json.dumps(result)

        def _run():
            with self.conn:
                self.conn.execute(sql, (workflow_id, name, payload, attempts, time.time()))

        async with self._lock:
            await asyncio.to_thread(_run)

