import asyncio
import os, sys
import tempfile
from pathlib import Path

import pytest

# Add src/ to sys.path for imports without an editable install
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

# Ensure required environment variables for config validation
_DATA_DIR = Path(tempfile.mkdtemp(prefix="recall-agent-tests-"))
os.environ.setdefault("OPENAI_API_KEY", "test-openai")
os.environ.setdefault("MSG_MODEL_ID", "model")
os.environ.setdefault("EMB_DIM", "8")
os.environ.setdefault("USE_LOCAL", "0")
os.environ.setdefault("ENABLE_MILVUS", "1")
os.environ.setdefault("SQL_DB_DIR", str(_DATA_DIR / "memory.db"))
os.environ.setdefault("SESSION_DB_DIR", str(_DATA_DIR / "sessions"))
os.environ.setdefault("STEP_INITIAL_DELAY", "0")


@pytest.fixture
def conversation_log(tmp_path):
    from recall_agent.memory.log import ConversationLog

    log = ConversationLog(str(tmp_path / "session.db"))
    yield log
    log.close()


@pytest.fixture
def workflow_repo(tmp_path):
    from recall_agent.memory.rag.sql import db
    from recall_agent.memory.rag.sql.repositories import WorkflowRepo

    conn = db.connect(str(tmp_path / "memory.db"))
    db.migrate(conn)
    yield WorkflowRepo(conn, asyncio.Lock())
    conn.close()


@pytest.fixture
def fake_index(monkeypatch):
    """In-memory stand-in for the Milvus-backed vector index module."""
    from recall_agent.memory.rag.model import Match, QueryResult
    from recall_agent.memory.rag.vector import vector_index

    class FakeIndex:
        def __init__(self):
            self.records = {}
            self.upsert_calls = 0
            self.query_calls = []
            self.flushes = 0

        async def upsert(self, records):
            self.upsert_calls += 1
            for r in records:
                self.records[r.id] = r

        async def query(self, vec, top_k, *, return_metadata=True):
            self.query_calls.append((list(vec), top_k, return_metadata))
            matches = [
                Match(id=r.id, score=1.0 - i * 0.1, metadata=dict(r.metadata))
                for i, r in enumerate(self.records.values())
            ]
            return QueryResult(matches=matches[:top_k])

        async def flush(self):
            self.flushes += 1

    fake = FakeIndex()
    monkeypatch.setattr(vector_index, "upsert", fake.upsert)
    monkeypatch.setattr(vector_index, "query", fake.query)
    monkeypatch.setattr(vector_index, "flush", fake.flush)
    return fake


@pytest.fixture
def fake_embed(monkeypatch):
    """Deterministic embeddings; records every text it embeds."""
    import numpy as np

    from recall_agent.config import rag
    from recall_agent.memory.rag import embeddings

    calls = []

    async def _embed(text: str):
        calls.append(text)
        return np.arange(rag.EMB_DIM, dtype=np.float32) + len(text)

    monkeypatch.setattr(embeddings, "embed", _embed)
    return calls
