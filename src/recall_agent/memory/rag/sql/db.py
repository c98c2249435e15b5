"""
SQLite bootstrap and connection helpers
=======================================

- One connection per database file (RAG workflow store, per-session logs).
- WAL + pragmatic PRAGMAs for decent concurrent read perf.
"""

from __future__ import annotations
from recall_agent.config import rag
import pathlib
import sqlite3
from typing import Optional


def db_path() -> str:
    return rag.SQL_DB_DIR


def connect(path: Optional[str] = None) -> sqlite3.Connection:
    target = pathlib.Path(path or db_path())
    if str(target) != ":memory:":
        target.parent.mkdir(parents=True, exist_ok=True)

    # Autocommit; we use explicit `with conn:` blocks in worker threads.
    conn = sqlite3.connect(
        str(target),
        isolation_level=None,
        check_same_thread=False,
    )

    # Pragmas: order matters a bit; set WAL first, then tuning.
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    conn.execute("PRAGMA temp_store=MEMORY;")
    # Reduce SQLITE_BUSY errors under contention
    conn.execute("PRAGMA busy_timeout=3000;")    # 3s

    # dict-like rows
    conn.row_factory = sqlite3.Row

    return conn


def migrate(conn: sqlite3.Connection) -> None:
    """
    Execute schema.sql (idempotent). Every statement in schema.sql uses
    IF NOT EXISTS.
    """
    schema_file = pathlib.Path(__file__).with_name("schema.sql")
    sql = schema_file.read_text(encoding="utf-8")
    with conn:  # single transaction for the whole migration
        conn.executescript(sql)
