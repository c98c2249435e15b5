"""
Embedding utilities
===================

Centralizes embedding logic so the rest of the codebase does not care
about model details (dimensionality, provider, etc.).
"""

from __future__ import annotations
import numpy as np
import hashlib
from recall_agent.clients.oai import embed_text
from recall_agent.config import rag
import logging

logger = logging.getLogger(__name__)

async def embed(text: str) -> np.ndarray:
    """
    Return embedding vector for ``text``.

    :param text: Input string to embed.
    :returns: ``np.ndarray`` of shape ``(EMB_DIM,)``.
    :raises Exception: Provider and dimension errors propagate; callers decide
        whether a failure is fatal (ingestion retries, retrieval degrades).
    """
    vec = await embed_text(text)
    if vec.shape != (rag.EMB_DIM,):
        raise ValueError(f"Expected embedding of dim {rag.EMB_DIM}, got shape {vec.shape}")
    return vec


def to_list(vec: np.ndarray) -> list[float]:
    """Convert an embedding to a JSON-serializable list of floats."""
    return np.asarray(vec, dtype=np.float32).astype(float).tolist()


def blake16(s: str) -> str:
    """Return 16-byte hex digest of ``s`` using BLAKE2b."""
    return hashlib.blake2b((s or "").encode("utf-8"), digest_size=16).hexdigest()
