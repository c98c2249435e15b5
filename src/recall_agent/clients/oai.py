"""Helpers for interacting with OpenAI API"""
from openai import AsyncOpenAI
from recall_agent.config import core, rag
import numpy as np

import logging
logger = logging.getLogger(__name__)

# One global async-capable client
aoai = AsyncOpenAI(api_key=core.OPENAI_API_KEY)

# ==============================================
# Embedding utilities
# ==============================================
async def embed_text(text: str, model: str | None = None) -> np.ndarray:
    """
    Return a float32 numpy vector for the given text using OpenAI embeddings.
    Model defaults to rag.EMB_MODEL_ID. Only the first returned embedding is used.
    """
    if not text:
        return np.zeros(rag.EMB_DIM, dtype=np.float32)

    use_model = model or rag.EMB_MODEL_ID
    resp = await aoai.embeddings.create(model=use_model, input=text)
    vec = np.asarray(resp.data[0].embedding, dtype=np.float32)
    if vec.size != rag.EMB_DIM:
        raise ValueError(f"Unexpected embedding size {vec.size} != {rag.EMB_DIM} for model {use_model}")

    return vec

# ==============================================
# Text utilities
# ==============================================

async def respond(
    messages: list[dict],
    model: str | None = None,
):
    """
    Send ``messages`` to the Responses API and return the raw response object.

    The caller is responsible for turning the response into text; see
    :func:`recall_agent.response.normalize.extract_text`.

    Example message format:
    .. code-block:: python
        [
            {
                "role": "system",
                "content": "You are a helpful assistant."
            },
            {
                "role": "user",
                "content": "Hello, how are you?"
            }
        ]
    """
    return await aoai.responses.create(
        model=model or core.MSG_MODEL_ID,
        input=messages,
    )
