"""
Pipeline step for response generation.
"""
from __future__ import annotations

import logging

from recall_agent.response import invoker
from recall_agent.response.engine import PipelineContext, PipelineStep

logger = logging.getLogger(__name__)


class GenerationStep(PipelineStep):
    """
    Generates the reply from the assembled messages.
    """

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.response_text = await invoker.generate(context.messages)
        return context
