"""Builds the message list sent to the model for one turn."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from recall_agent.memory.log import Turn
from recall_agent.memory.rag import MemorySnippet, format_memory

MEMORY_LABEL = "Relevant memory:"


def assemble(
    recent_turns: Iterable[Turn],
    memory: Sequence[MemorySnippet],
    system_prompt: str,
) -> List[dict[str, str]]:
    """
    Return ``[system, *history, memory?]`` in chat-completion message format.

    History keeps each turn's role and content, oldest first. Retrieved memory
    goes in one trailing system message, only when there is any.
    """
    messages: List[dict[str, str]] = [{"role": "system", "content": system_prompt}]
    messages.extend(turn.to_message() for turn in recent_turns)
    if memory:
        messages.append({"role": "system", "content": f"{MEMORY_LABEL}\n{format_memory(memory)}"})
    return messages
