"""HTTP and WebSocket front door: routes each connection to its session actor."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, Field

from recall_agent.config import milvus, server
from recall_agent.memory import rag
from recall_agent.memory.rag import scheduler
from recall_agent.memory.rag.vector.health import validate_connection
from recall_agent.session import SessionRegistry

logger = logging.getLogger(__name__)

registry = SessionRegistry()


class IngestRequest(BaseModel):
    doc_id: str = Field(min_length=1)
    text: str


class _WebSocketConnection:
    """Adapts a FastAPI WebSocket to the session ``Connection`` protocol."""

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket

    async def send(self, data: str) -> None:
        await self.websocket.send_text(data)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if milvus.ENABLE_MILVUS:
        try:
            validate_connection()
        except Exception as e:
            logger.error("Milvus validation failed: %s", e)
            raise
    else:
        logger.info("ENABLE_MILVUS is false; skipping Milvus validation")

    await scheduler.start()
    try:
        yield
    finally:
        await scheduler.stop()
        registry.close()


app = FastAPI(title="recall-agent", lifespan=lifespan)


@app.websocket("/agents/{session_id}")
async def session_socket(websocket: WebSocket, session_id: str) -> None:
    await websocket.accept()
    actor = registry.get(session_id)
    conn = _WebSocketConnection(websocket)

    try:
        await actor.on_connect(conn)
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            payload = message.get("text")
            if payload is None:
                payload = message.get("bytes") or b""
            await actor.on_message(conn, payload)
    except WebSocketDisconnect:
        pass
    except RuntimeError as e:
        # Starlette raises RuntimeError when sending on a socket the client already closed
        logger.info("Session %s: client went away mid-send (%s)", session_id, e)
        return
    logger.info("Session %s disconnected", session_id)


@app.post("/ingest", status_code=202)
async def ingest_document(body: IngestRequest) -> dict:
    workflow_id = await rag.ingest(body.doc_id, body.text)
    return {"workflow_id": workflow_id}


@app.get("/ingest/{workflow_id}")
async def ingestion_status(workflow_id: str) -> dict:
    status = await rag.ingestion_status(workflow_id)
    if status is None:
        raise HTTPException(status_code=404, detail="Workflow not found")
    return status


@app.get("/agents/{session_id}/summary")
async def session_summary(session_id: str) -> dict:
    summary = await registry.get(session_id).summarize()
    return {"summary": summary}


@app.get("/agents/{session_id}/state")
async def session_state(session_id: str) -> dict:
    state = registry.snapshot(session_id)
    if state is None:
        raise HTTPException(status_code=404, detail="Agent not found")
    return {"status": state.status.value, "last_reply": state.last_reply}


def run() -> None:
    """Start the HTTP/WebSocket server using configuration from the environment."""

    uvicorn.run(app, host=server.HOST, port=server.PORT, log_level=server.LOG_LEVEL)
