"""
Pipeline step for reading recent history and building the prompt messages.
"""
from __future__ import annotations

import logging

from recall_agent.config import core
from recall_agent.response.assembler import assemble
from recall_agent.response.engine import PipelineContext, PipelineStep

logger = logging.getLogger(__name__)


class ContextAssemblyStep(PipelineStep):
    """
    Fetches the last ``window`` turns and merges them with recalled memory.
    """

    def __init__(self, window: int | None = None, system_prompt: str | None = None):
        self.window = core.HISTORY_WINDOW if window is None else window
        self.system_prompt = system_prompt if system_prompt is not None else core.SYSTEM_PROMPT

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.history = await context.log.recent(self.window)
        context.messages = assemble(context.history, context.memory, self.system_prompt)
        logger.debug(
            "Assembled %d messages (history=%d memory=%d)",
            len(context.messages), len(context.history), len(context.memory),
        )
        return context
