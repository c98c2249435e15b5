"""Keyed registry of live session actors."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Optional

from recall_agent.config import rag
from recall_agent.memory.log import ConversationLog
from recall_agent.memory.rag.embeddings import blake16
from recall_agent.response import ResponsePipeline, build_pipeline
from .actor import SessionActor, SessionState

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Maps session ids to actors, creating each actor on first use."""

    def __init__(
        self,
        log_dir: str | Path | None = None,
        pipeline_factory: Callable[[], ResponsePipeline] = build_pipeline,
    ):
        self.log_dir = Path(log_dir or rag.SESSION_DB_DIR)
        self.pipeline_factory = pipeline_factory
        self._actors: Dict[str, SessionActor] = {}

    def log_path(self, session_id: str) -> Path:
        return self.log_dir / f"{blake16(session_id)}.db"

    def get(self, session_id: str) -> SessionActor:
        actor = self._actors.get(session_id)
        if actor is None:
            log = ConversationLog(str(self.log_path(session_id)))
            actor = SessionActor(session_id, log, self.pipeline_factory())
            self._actors[session_id] = actor
            logger.info("Created session actor %s", session_id)
        return actor

    def snapshot(self, session_id: str) -> Optional[SessionState]:
        actor = self._actors.get(session_id)
        return actor.state if actor else None

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._actors

    def __len__(self) -> int:
        return len(self._actors)

    def close(self) -> None:
        for actor in self._actors.values():
            actor.log.close()
        self._actors.clear()
