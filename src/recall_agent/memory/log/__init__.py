"""Session-scoped, append-only conversation log."""

from .repositories import ConversationLog, Turn

__all__ = ["ConversationLog", "Turn"]
