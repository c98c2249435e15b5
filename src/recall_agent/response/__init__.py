"""Entry-point helpers for generating replies."""

from __future__ import annotations

import logging

from recall_agent.response.engine import PipelineContext, ResponsePipeline
from recall_agent.response.steps.context import ContextAssemblyStep
from recall_agent.response.steps.generation import GenerationStep
from recall_agent.response.steps.memory import MemoryRetrievalStep

logger = logging.getLogger(__name__)


def build_pipeline() -> ResponsePipeline:
    """Return the default retrieval-augmented response pipeline."""

    return ResponsePipeline([
        MemoryRetrievalStep(),
        ContextAssemblyStep(),
        GenerationStep(),
    ])


__all__ = ["PipelineContext", "ResponsePipeline", "build_pipeline"]
