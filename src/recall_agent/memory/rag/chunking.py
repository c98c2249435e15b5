"""Fixed-size, lossless document chunking."""

from __future__ import annotations

from typing import List

from .model import Chunk

DEFAULT_CHUNK_SIZE = 800


def chunk_text(text: str, size: int = DEFAULT_CHUNK_SIZE) -> List[str]:
    """
    Split ``text`` into consecutive slices of ``size`` characters.

    Every slice but the last has exactly ``size`` characters and
    ``"".join(chunk_text(t, n)) == t``. Empty text produces no chunks.
    """
    if size < 1:
        raise ValueError("Chunk size must be >= 1")
    return [text[i : i + size] for i in range(0, len(text), size)]


def chunk_document(doc_id: str, text: str, size: int = DEFAULT_CHUNK_SIZE) -> List[Chunk]:
    """Return the chunks of ``text`` tagged with ``doc_id`` and their index."""
    return [Chunk(doc_id=doc_id, index=i, text=c) for i, c in enumerate(chunk_text(text, size))]
