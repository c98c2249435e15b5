"""Calls the generation model and returns plain text."""

from __future__ import annotations

import logging
from typing import Any

from recall_agent.clients import oai, ollama
from recall_agent.config import core, local_llm
from .normalize import extract_text

logger = logging.getLogger(__name__)


async def generate(messages: list[dict[str, Any]], *, model: str | None = None) -> str:
    """
    Send ``messages`` to the configured model and return the normalized reply.

    Uses the local Ollama server when ``USE_LOCAL`` is enabled, OpenAI
    otherwise. Errors from the provider propagate.
    """
    if local_llm.USE_LOCAL:
        raw = await ollama.chat(messages, model=local_llm.LOCAL_MODEL_ID)
    else:
        raw = await oai.respond(messages, model=model or core.MSG_MODEL_ID)
    text = extract_text(raw)
    logger.debug("Generated %d chars from %d messages", len(text), len(messages))
    return text
