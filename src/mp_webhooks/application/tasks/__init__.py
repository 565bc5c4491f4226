"""Application tasks – generic task descriptor and schedulers.

Engines never sleep or manage workers; they hand :class:`Task` objects to a
:class:`TaskScheduler` (in-memory, asyncio, or an external broker adapter).
"""
from mp_webhooks.application.tasks.task import Task, TaskExecution
from mp_webhooks.application.tasks.scheduler import TaskScheduler, execute_task
from mp_webhooks.application.tasks.in_memory import InMemoryTaskScheduler
from mp_webhooks.application.tasks.asyncio_scheduler import AsyncioTaskScheduler

__all__ = [
    "AsyncioTaskScheduler",
    "InMemoryTaskScheduler",
    "Task",
    "TaskExecution",
    "TaskScheduler",
    "execute_task",
]
