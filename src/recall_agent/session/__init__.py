"""Per-session actors and the chat channel wire format."""

from .actor import SessionActor, SessionState, SessionStatus
from .frames import Connection, InboundMessage, chat_frame, parse_inbound
from .registry import SessionRegistry

__all__ = [
    "Connection",
    "InboundMessage",
    "SessionActor",
    "SessionRegistry",
    "SessionState",
    "SessionStatus",
    "chat_frame",
    "parse_inbound",
]
