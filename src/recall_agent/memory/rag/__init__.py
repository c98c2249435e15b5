"""
Public façade for RAG memory
===========================

Stable, async API for document recall and ingestion. Import from here::

    from recall_agent.memory.rag import ingest, recall, ...
"""

from __future__ import annotations

from .model import MemorySnippet
from .retrieval import format_memory, recall, retrieve
from . import scheduler as _scheduler

__all__ = [
    "MemorySnippet",
    "ingest",
    "ingestion_status",
    "recall",
    "retrieve",
    "format_memory",
]


async def ingest(doc_id: str, text: str) -> str:
    """
    Start durable ingestion of a document and return the workflow id.

    The call returns once the workflow is recorded; chunking, embedding and
    upserting continue in the background.
    """
    return await _scheduler.submit(doc_id, text)


async def ingestion_status(workflow_id: str):
    """Return the recorded state of an ingestion workflow, or ``None``."""
    return await _scheduler.status(workflow_id)
