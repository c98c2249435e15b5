"""
Per-session actor
=================

Owns one conversation: serializes inbound messages, runs the response
pipeline, keeps the log up to date and always answers the client.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Any

from recall_agent.config import core
from recall_agent.memory.log import ConversationLog
from recall_agent.response import invoker
from recall_agent.response.engine import PipelineContext, ResponsePipeline
from .frames import Connection, chat_frame, parse_inbound

logger = logging.getLogger(__name__)


class SessionStatus(str, enum.Enum):
    IDLE = "idle"
    PROCESSING = "processing"


@dataclass(slots=True)
class SessionState:
    """Observable session state. ``last_reply`` mirrors the latest reply sent; the log is authoritative."""

    status: SessionStatus = SessionStatus.IDLE
    last_reply: str = ""


class SessionActor:
    """Processes one inbound message at a time for a single session."""

    def __init__(self, session_id: str, log: ConversationLog, pipeline: ResponsePipeline):
        self.session_id = session_id
        self.log = log
        self.pipeline = pipeline
        self.state = SessionState()
        self._lock = asyncio.Lock()

    async def on_connect(self, conn: Connection) -> None:
        """Greet a newly connected client."""
        await conn.send(chat_frame(core.GREETING))

    async def on_message(self, conn: Connection, payload: Any) -> str:
        """
        Handle one inbound frame and send exactly one reply frame.

        Messages arriving while another is processed wait their turn. If any
        step fails the client receives the apology text and no assistant
        turn is logged.
        """
        async with self._lock:
            self.state.status = SessionStatus.PROCESSING
            try:
                text = parse_inbound(payload).text
                try:
                    reply = await self._respond(text)
                except Exception:
                    logger.exception("Turn failed for session %s; sending apology", self.session_id)
                    reply = core.APOLOGY

                self.state.last_reply = reply
                await conn.send(chat_frame(reply))
                return reply
            finally:
                self.state.status = SessionStatus.IDLE

    async def _respond(self, text: str) -> str:
        await self.log.ensure_schema()
        await self.log.append("user", text)

        reply = await self.pipeline.run(
            PipelineContext(query=text, log=self.log, session_id=self.session_id)
        )

        await self.log.append("assistant", reply)
        return reply

    async def summarize(self) -> str:
        """Return a bullet-point summary of the latest turns."""
        await self.log.ensure_schema()
        turns = await self.log.latest(core.SUMMARY_WINDOW)
        transcript = "\n".join(f"{t.role}: {t.content}" for t in turns)
        return await invoker.generate(
            [
                {"role": "system", "content": core.SUMMARY_PROMPT},
                {"role": "user", "content": transcript},
            ],
            model=core.SUMMARY_MODEL_ID,
        )
