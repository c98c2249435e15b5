"""
Core engine for the per-turn response pipeline.
"""
from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from recall_agent.memory.log import ConversationLog, Turn
    from recall_agent.memory.rag.model import MemorySnippet

logger = logging.getLogger(__name__)


@dataclass
class PipelineContext:
    """
    Holds the state of one turn's response generation.
    """
    # Text of the inbound user message (already appended to the log).
    query: str

    # The session's conversation log; the authoritative history.
    log: ConversationLog

    # Owning session, for log lines only.
    session_id: str = ""

    # Snippets recalled from the vector index.
    # Populated by MemoryRetrievalStep; empty when retrieval failed.
    memory: list[MemorySnippet] = field(default_factory=list)

    # Recent turns, oldest first. Populated by ContextAssemblyStep.
    history: tuple[Turn, ...] = ()

    # Messages sent to the model. Populated by ContextAssemblyStep.
    messages: list[dict[str, Any]] = field(default_factory=list)

    # Normalized model output. Populated by GenerationStep.
    response_text: str = ""


class PipelineStep(ABC):
    """One stage of a turn. Steps read and fill fields of the shared context."""

    @abstractmethod
    async def run(self, context: PipelineContext) -> PipelineContext:
        ...


class ResponsePipeline:
    """
    Runs the steps of one turn in order and yields the reply text.

    A failing step aborts the turn; the session actor decides what the user
    sees instead.
    """

    def __init__(self, steps: list[PipelineStep]):
        self.steps = steps

    async def run(self, context: PipelineContext) -> str:
        started = time.perf_counter()
        for step in self.steps:
            step_name = type(step).__name__
            t0 = time.perf_counter()
            try:
                context = await step.run(context)
            except Exception as e:
                logger.error(
                    "Session %s: %s failed after %.0fms (err=%s)",
                    context.session_id or "-", step_name, (time.perf_counter() - t0) * 1000, e,
                )
                raise
            logger.debug(
                "Session %s: %s done in %.0fms",
                context.session_id or "-", step_name, (time.perf_counter() - t0) * 1000,
            )

        logger.info(
            "Session %s: turn answered in %.0fms (memory=%d history=%d chars=%d)",
            context.session_id or "-", (time.perf_counter() - started) * 1000,
            len(context.memory), len(context.history), len(context.response_text),
        )
        return context.response_text
