"""Application tasks – TaskScheduler protocol and the shared run helper."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol, runtime_checkable

from mp_webhooks.application.tasks.task import Task, TaskExecution
from mp_webhooks.kernel.time import Clock
from mp_webhooks.observability.logging import get_logger

__all__ = ["TaskScheduler", "execute_task"]

logger = get_logger(__name__)


@runtime_checkable
class TaskScheduler(Protocol):
    """Port: run work now or after a delay, on any worker."""

    async def schedule(self, task: Task, delay_seconds: float) -> None: ...
    async def run_now(self, task: Task) -> None: ...


async def execute_task(task: Task, attempt: int, clock: Clock) -> TaskExecution:
    """Run *task* once and capture the outcome; handler errors are recorded, not raised."""
    started_at = datetime.now(tz=timezone.utc)
    t0 = clock.monotonic()
    error: str | None = None
    error_type: str | None = None
    try:
        await task.handler()
    except Exception as exc:  # noqa: BLE001
        error = str(exc)
        error_type = type(exc).__name__
        logger.warning(
            "task.failed",
            task=task.name,
            key=task.key,
            attempt=attempt,
            max_attempts=task.max_attempts,
            error=error,
            error_type=error_type,
        )
    duration_ms = (clock.monotonic() - t0) * 1000
    return TaskExecution(
        task_name=task.name,
        task_key=task.key,
        attempt=attempt,
        started_at=started_at,
        duration_ms=duration_ms,
        error=error,
        error_type=error_type,
    )
