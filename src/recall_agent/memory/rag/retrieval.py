"""
Memory retrieval
================

Embeds a query and looks up related chunks in the vector index. Retrieval
is best-effort: :func:`recall` is the one place where failures turn into
an empty result.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from . import embeddings
from .model import MemorySnippet
from .vector import vector_index

logger = logging.getLogger(__name__)

MEMORY_SEPARATOR = "\n---\n"


async def retrieve(query_text: str, k: int) -> List[MemorySnippet]:
    """Return up to ``k`` snippets related to ``query_text``, best match first.

    Matches without stored text are dropped. Errors propagate.
    """
    if k < 1:
        return []
    qvec = await embeddings.embed(query_text)
    result = await vector_index.query(qvec, k, return_metadata=True)

    snippets: List[MemorySnippet] = []
    for match in result.matches[:k]:
        metadata = dict(match.metadata or {})
        text = metadata.pop("text", None)
        if not text:
            continue
        snippets.append(MemorySnippet(text=str(text), score=float(match.score), source_metadata=metadata))
    return snippets


async def recall(query_text: str, k: int) -> List[MemorySnippet]:
    """Best-effort :func:`retrieve`: any failure yields an empty list."""
    try:
        snippets = await retrieve(query_text, k)
    except Exception as e:
        logger.warning("Memory retrieval failed; continuing without memory (err=%s)", e)
        return []

    if not snippets:
        logger.info("Memory retrieval returned no snippets")
    return snippets


def format_memory(snippets: Sequence[MemorySnippet]) -> str:
    """Join snippet texts with :data:`MEMORY_SEPARATOR`."""
    return MEMORY_SEPARATOR.join(s.text for s in snippets)
