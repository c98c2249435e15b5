"""Helpers for generating replies with a local Ollama server"""

from recall_agent.config import local_llm
from ollama import AsyncClient

client = AsyncClient(host=local_llm.LOCAL_SERVER_URL)

async def chat(
        messages: list[dict],
        model: str | None = None,
    ) -> str:
    """
    Send the assembled turn messages to the local model and return its reply text.

    ``messages`` use the same ``{"role", "content"}`` format as the OpenAI
    path, so the pipeline does not care which backend answers.
    """
    resp = await client.chat(
        model=model or local_llm.LOCAL_MODEL_ID,
        messages=messages,
        options={"temperature": local_llm.LOCAL_TEMPERATURE},
        keep_alive=local_llm.LOCAL_KEEP_ALIVE,
    )

    return (resp.message.content or "").strip()
