"""
Pipeline step for best-effort memory retrieval.
"""
from __future__ import annotations

import logging

from recall_agent.config import core
from recall_agent.memory import rag
from recall_agent.response.engine import PipelineContext, PipelineStep

logger = logging.getLogger(__name__)


class MemoryRetrievalStep(PipelineStep):
    """
    Recalls snippets related to the query. Never fails the turn.
    """

    def __init__(self, k: int | None = None):
        self.k = core.MEMORY_K if k is None else k

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.memory = await rag.recall(context.query, self.k)
        logger.debug("Recalled %d memory snippet(s)", len(context.memory))
        return context
