"""Application tasks – AsyncioTaskScheduler backed by the running event loop."""
from __future__ import annotations

import asyncio

from mp_webhooks.application.tasks.scheduler import execute_task
from mp_webhooks.application.tasks.task import Task, TaskExecution
from mp_webhooks.kernel.time import Clock, SystemClock
from mp_webhooks.observability.logging import get_logger

__all__ = ["AsyncioTaskScheduler"]

logger = get_logger(__name__)


class AsyncioTaskScheduler:
    """Run tasks as background ``asyncio`` tasks; delayed tasks sleep first.

    Work is lost on process exit. Use a durable broker-backed scheduler when
    deliveries must survive restarts.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()
        self._inflight: set[asyncio.Task[None]] = set()
        self._closed = False
        self.execution_log: list[TaskExecution] = []

    async def schedule(self, task: Task, delay_seconds: float) -> None:
        self._spawn(task, delay_seconds, attempt=1)

    async def run_now(self, task: Task) -> None:
        self._spawn(task, 0, attempt=1)

    async def wait_idle(self) -> None:
        """Wait until no task is running or waiting for its delay."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel pending work and wait for cancellation to settle."""
        self._closed = True
        for t in list(self._inflight):
            t.cancel()
        await asyncio.gather(*list(self._inflight), return_exceptions=True)

    @property
    def inflight(self) -> int:
        return len(self._inflight)

    def _spawn(self, task: Task, delay_seconds: float, attempt: int) -> None:
        if self._closed:
            raise RuntimeError("AsyncioTaskScheduler is closed")
        runner = asyncio.get_running_loop().create_task(self._run(task, delay_seconds, attempt))
        self._inflight.add(runner)
        runner.add_done_callback(self._inflight.discard)

    async def _run(self, task: Task, delay_seconds: float, attempt: int) -> None:
        if delay_seconds > 0:
            await asyncio.sleep(delay_seconds)
        execution = await execute_task(task, attempt, self._clock)
        self.execution_log.append(execution)
        if not execution.success and attempt < task.max_attempts and not self._closed:
            logger.info("task.retry_scheduled", task=task.name, key=task.key, attempt=attempt + 1)
            self._spawn(task, task.retry_delay_seconds, attempt + 1)
