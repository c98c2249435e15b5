"""
Durable, retriable workflow steps
=================================

A workflow is a sequence of named steps. Each step runs under a bounded
retry policy and its result is written to the step journal before the
workflow moves on. Running a step whose result is already journaled
returns the recorded result without executing it again, so a resumed
workflow picks up where the previous process stopped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

from tenacity import AsyncRetrying, RetryCallState, RetryError, stop_after_attempt, wait_exponential

from recall_agent.config import rag
from .sql.repositories import MISSING, WorkflowRepo

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StepFailedError(RuntimeError):
    """Raised when a step exhausts its retry policy."""

    def __init__(self, name: str, attempts: int, cause: BaseException):
        super().__init__(f"Step '{name}' failed after {attempts} attempt(s): {cause}")
        self.name = name
        self.attempts = attempts
        self.cause = cause


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    max_attempts: int = 3
    initial_delay: float = 1.0
    backoff: float = 2.0
    max_delay: float = 30.0

    @classmethod
    def from_config(cls) -> "RetryPolicy":
        return cls(
            max_attempts=max(1, rag.STEP_MAX_ATTEMPTS),
            initial_delay=rag.STEP_INITIAL_DELAY,
            backoff=rag.STEP_BACKOFF,
            max_delay=rag.STEP_MAX_DELAY,
        )

    def wait(self) -> wait_exponential:
        """Backoff of ``initial_delay * backoff ** (attempt - 1)`` seconds, capped at ``max_delay``."""
        return wait_exponential(multiplier=self.initial_delay, exp_base=self.backoff, max=self.max_delay)

    def retrying(self, **kwargs: Any) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(max(1, self.max_attempts)),
            wait=self.wait(),
            **kwargs,
        )


class WorkflowStep:
    """Step executor bound to one workflow instance."""

    def __init__(self, workflow_id: str, journal: WorkflowRepo, policy: RetryPolicy | None = None):
        self.workflow_id = workflow_id
        self.journal = journal
        self.policy = policy or RetryPolicy.from_config()

    def _log_retry(self, name: str) -> Callable[[RetryCallState], None]:
        def _before_sleep(state: RetryCallState) -> None:
            logger.warning(
                "Step %s failed (workflow=%s attempt=%d/%d err=%s); retrying in %.1fs",
                name, self.workflow_id, state.attempt_number, self.policy.max_attempts,
                state.outcome.exception() if state.outcome else None,
                state.next_action.sleep if state.next_action else 0.0,
            )
        return _before_sleep

    async def do(self, name: str, fn: Callable[[], Awaitable[T]]) -> T:
        """
        Run ``fn`` as the step ``name`` and return its result.

        ``fn`` must be safe to re-run and return a JSON-serializable value.

        :raises StepFailedError: When every attempt allowed by the policy fails.
        """
        recorded = await self.journal.step_result(self.workflow_id, name)
        if recorded is not MISSING:
            logger.debug("Replaying recorded step %s (workflow=%s)", name, self.workflow_id)
            return recorded

        attempts = 0
        try:
            async for attempt in self.policy.retrying(before_sleep=self._log_retry(name)):
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    result = await fn()
        except RetryError as e:
            cause = e.last_attempt.exception()
            logger.error(
                "Step %s failed permanently (workflow=%s attempts=%d err=%s)",
                name, self.workflow_id, attempts, cause,
            )
            raise StepFailedError(name, attempts, cause) from cause

        await self.journal.record_step(self.workflow_id, name, result, attempts)
        return result
