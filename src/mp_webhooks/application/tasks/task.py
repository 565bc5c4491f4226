"""Application tasks – Task descriptor and execution record."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable

__all__ = ["Task", "TaskExecution"]


@dataclass(frozen=True)
class Task:
    """A unit of work handed to a :class:`TaskScheduler`.

    ``max_attempts`` and ``retry_delay_seconds`` describe the *scheduler's*
    retry policy for a failing handler. Outbound delivery sets
    ``max_attempts=1`` because the delivery engine schedules its own retries.
    """

    name: str
    handler: Callable[[], Awaitable[None]]
    key: str = ""
    max_attempts: int = 1
    retry_delay_seconds: float = 0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("Task.max_attempts must be >= 1")
        if self.retry_delay_seconds < 0:
            raise ValueError("Task.retry_delay_seconds must be >= 0")


@dataclass(frozen=True)
class TaskExecution:
    """Outcome of one run of a task handler."""

    task_name: str
    task_key: str
    attempt: int
    started_at: datetime
    duration_ms: float
    error: str | None = None
    error_type: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None
