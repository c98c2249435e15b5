"""Wire format of the realtime chat channel."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Protocol


class Connection(Protocol):
    """Outbound side of a session's duplex channel."""

    async def send(self, data: str) -> None: ...


@dataclass(frozen=True, slots=True)
class InboundMessage:
    text: str


def _raw_text(payload: Any) -> str:
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload).decode("utf-8", errors="replace")
    return str(payload)


def parse_inbound(payload: Any) -> InboundMessage:
    """
    Interpret an inbound frame as ``{"text": ...}``.

    Frames that are not a JSON object with a ``text`` field are treated as
    plain text, so a malformed frame is never rejected.
    """
    raw = _raw_text(payload)
    try:
        data = json.loads(raw)
    except ValueError:
        return InboundMessage(text=raw)
    if isinstance(data, dict) and "text" in data:
        text = data["text"]
        return InboundMessage(text=text if isinstance(text, str) else json.dumps(text))
    return InboundMessage(text=raw)


def chat_frame(text: str) -> str:
    """Serialize an outbound ``{"type": "chat", "text": ...}`` frame."""
    return json.dumps({"type": "chat", "text": text}, ensure_ascii=False)
