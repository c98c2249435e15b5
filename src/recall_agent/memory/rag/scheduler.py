"""Fire-and-forget scheduling of durable ingestion workflows."""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Dict, List, Optional

from .ingest import IngestReport, IngestWorkflow
from .sql import db as _db
from .sql.repositories import WorkflowRepo
from .workflow import RetryPolicy, WorkflowStep

logger = logging.getLogger(__name__)

_repo: WorkflowRepo | None = None
_tasks: Dict[str, asyncio.Task] = {}


def default_repo() -> WorkflowRepo:
    """Return the process-wide workflow repository, creating the database on first use."""
    global _repo
    if _repo is None:
        conn = _db.connect()
        _db.migrate(conn)
        _repo = WorkflowRepo(conn, asyncio.Lock())
    return _repo


async def submit(
    doc_id: str,
    text: str,
    *,
    repo: WorkflowRepo | None = None,
    workflow: IngestWorkflow | None = None,
    policy: RetryPolicy | None = None,
) -> str:
    """Record a new ingestion workflow, start it in the background and return its id."""
    repo = repo or default_repo()
    workflow_id = uuid.uuid4().hex
    await repo.create(workflow_id, doc_id, text)
    _schedule(workflow_id, doc_id, text, repo, workflow or IngestWorkflow(), policy)
    logger.info("Queued ingestion workflow %s for doc %s (%d chars)", workflow_id, doc_id, len(text))
    return workflow_id


def _schedule(
    workflow_id: str,
    doc_id: str,
    text: str,
    repo: WorkflowRepo,
    workflow: IngestWorkflow,
    policy: RetryPolicy | None,
) -> asyncio.Task:
    task = asyncio.create_task(
        _run(workflow_id, doc_id, text, repo, workflow, policy), name=f"ingest:{workflow_id}"
    )
    _tasks[workflow_id] = task
    task.add_done_callback(lambda _t: _tasks.pop(workflow_id, None))
    return task


async def _run(
    workflow_id: str,
    doc_id: str,
    text: str,
    repo: WorkflowRepo,
    workflow: IngestWorkflow,
    policy: RetryPolicy | None,
) -> Optional[IngestReport]:
    await repo.set_status(workflow_id, "running")
    step = WorkflowStep(workflow_id, repo, policy)
    try:
        report = await workflow.run(doc_id, text, step)
    except Exception as e:
        logger.exception("Ingestion workflow %s aborted", workflow_id)
        await repo.set_status(workflow_id, "errored", error=str(e))
        return None

    status = "complete" if report.ok else "errored"
    await repo.set_status(
        workflow_id, status, chunk_count=report.chunk_count, failed=report.failed
    )
    logger.info(
        "Ingestion workflow %s %s (chunks=%d failed=%d)",
        workflow_id, status, report.chunk_count, len(report.failed),
    )
    return report


async def start(
    *,
    repo: WorkflowRepo | None = None,
    workflow: IngestWorkflow | None = None,
    policy: RetryPolicy | None = None,
) -> List[str]:
    """Resume workflows a previous process left queued or running; return their ids."""
    repo = repo or default_repo()
    resumed: List[str] = []
    for workflow_id, doc_id, text in await repo.pending():
        if workflow_id in _tasks:
            continue
        _schedule(workflow_id, doc_id, text, repo, workflow or IngestWorkflow(), policy)
        resumed.append(workflow_id)
    if resumed:
        logger.info("Resumed %d ingestion workflow(s)", len(resumed))
    return resumed


async def status(workflow_id: str, *, repo: WorkflowRepo | None = None) -> Optional[Dict[str, Any]]:
    """Return the recorded state of a workflow, or ``None`` when unknown."""
    return await (repo or default_repo()).get(workflow_id)


async def drain() -> None:
    """Wait for every scheduled workflow to finish."""
    while _tasks:
        await asyncio.gather(*list(_tasks.values()), return_exceptions=True)


async def stop() -> None:
    """Cancel in-flight workflows; they stay ``running`` and resume on the next :func:`start`."""
    tasks = list(_tasks.values())
    for task in tasks:
        task.cancel()
    for task in tasks:
        try:
            await task
        except asyncio.CancelledError:  # pragma: no cover - normal cancellation
            pass
    _tasks.clear()
