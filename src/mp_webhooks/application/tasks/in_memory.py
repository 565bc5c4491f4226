"""Application tasks – InMemoryTaskScheduler for unit tests and single-process use."""
from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field

from mp_webhooks.application.tasks.scheduler import execute_task
from mp_webhooks.application.tasks.task import Task, TaskExecution
from mp_webhooks.kernel.time import Clock, SystemClock

__all__ = ["InMemoryTaskScheduler"]


@dataclass(order=True)
class _Queued:
    due_at: float
    seq: int
    task: Task = field(compare=False)
    attempt: int = field(compare=False)


class InMemoryTaskScheduler:
    """Scheduler that keeps tasks in a due-time ordered queue.

    * ``eager=False`` (default): nothing runs until :meth:`run_due` or
      :meth:`drain` is awaited, which lets tests observe intermediate state.
    * ``eager=True``: every task runs inline as soon as it is submitted and
      delays are recorded but not waited for.

    Failing handlers are re-queued after ``task.retry_delay_seconds`` while
    attempts remain (``task.max_attempts``).
    """

    def __init__(self, clock: Clock | None = None, *, eager: bool = False) -> None:
        self._clock = clock or SystemClock()
        self._eager = eager
        self._queue: list[_Queued] = []
        self._seq = itertools.count()
        self.execution_log: list[TaskExecution] = []
        self.requested_delays: list[float] = []

    async def schedule(self, task: Task, delay_seconds: float) -> None:
        self.requested_delays.append(delay_seconds)
        await self._submit(task, delay_seconds, attempt=1)

    async def run_now(self, task: Task) -> None:
        await self._submit(task, 0, attempt=1)

    async def run_due(self) -> list[TaskExecution]:
        """Run every queued task whose due time has passed."""
        executions: list[TaskExecution] = []
        while self._queue and self._queue[0].due_at <= self._clock.monotonic():
            item = heapq.heappop(self._queue)
            executions.append(await self._run(item.task, item.attempt))
        return executions

    async def drain(self, limit: int = 10_000) -> list[TaskExecution]:
        """Run queued tasks in due order, ignoring delays, until the queue is empty."""
        executions: list[TaskExecution] = []
        while self._queue:
            if len(executions) >= limit:
                raise RuntimeError(f"drain() exceeded {limit} executions; tasks keep rescheduling")
            item = heapq.heappop(self._queue)
            executions.append(await self._run(item.task, item.attempt))
        return executions

    @property
    def pending(self) -> list[Task]:
        return [item.task for item in sorted(self._queue)]

    @property
    def failures(self) -> list[TaskExecution]:
        return [e for e in self.execution_log if not e.success]

    async def _submit(self, task: Task, delay_seconds: float, attempt: int) -> None:
        if self._eager:
            await self._run(task, attempt)
            return
        due_at = self._clock.monotonic() + delay_seconds
        heapq.heappush(self._queue, _Queued(due_at, next(self._seq), task, attempt))

    async def _run(self, task: Task, attempt: int) -> TaskExecution:
        execution = await execute_task(task, attempt, self._clock)
        self.execution_log.append(execution)
        if not execution.success and attempt < task.max_attempts:
            await self._submit(task, task.retry_delay_seconds, attempt + 1)
        return execution
