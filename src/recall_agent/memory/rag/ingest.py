"""
Ingestion: document -> chunks -> embeddings -> vector index
===========================================================

Each chunk goes through two journaled steps, ``embed:<i>`` followed by
``upsert:<i>``. Chunks are independent: a chunk whose step exhausts its
retries is reported as failed while the others complete.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List

from recall_agent.config import rag
from . import embeddings
from .chunking import chunk_document
from .model import Chunk, VectorRecord
from .vector import vector_index
from .workflow import StepFailedError, WorkflowStep

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IngestReport:
    doc_id: str
    chunk_count: int
    failed: List[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


class IngestWorkflow:
    """Chunk, embed and upsert one document."""

    def __init__(self, chunk_size: int | None = None, concurrency: int | None = None):
        self.chunk_size = chunk_size or rag.CHUNK_SIZE
        self.concurrency = max(1, concurrency or rag.INGEST_CONCURRENCY)

    async def run(self, doc_id: str, text: str, step: WorkflowStep) -> IngestReport:
        chunks = chunk_document(doc_id, text, self.chunk_size)
        logger.info(
            "Ingesting doc %s (workflow=%s chunks=%d)", doc_id, step.workflow_id, len(chunks)
        )
        sem = asyncio.Semaphore(self.concurrency)

        async def _guarded(chunk: Chunk) -> None:
            async with sem:
                await self._ingest_chunk(chunk, step)

        results = await asyncio.gather(*(_guarded(c) for c in chunks), return_exceptions=True)

        report = IngestReport(doc_id=doc_id, chunk_count=len(chunks))
        for chunk, outcome in zip(chunks, results):
            if isinstance(outcome, StepFailedError):
                report.failed.append(chunk.index)
            elif isinstance(outcome, BaseException):
                raise outcome
        if report.chunk_count > len(report.failed):
            await vector_index.flush()
        if report.failed:
            logger.warning("Doc %s ingested with failed chunks %s", doc_id, report.failed)
        return report

    async def _ingest_chunk(self, chunk: Chunk, step: WorkflowStep) -> None:
        async def _embed() -> list[float]:
            return embeddings.to_list(await embeddings.embed(chunk.text))

        vec = await step.do(f"embed:{chunk.index}", _embed)

        async def _upsert() -> str:
            await vector_index.upsert([VectorRecord.from_chunk(chunk, vec)])
            return chunk.record_id

        await step.do(f"upsert:{chunk.index}", _upsert)
