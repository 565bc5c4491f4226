"""Application layer – delivery and receipt engines plus the task abstraction."""
from mp_webhooks.application.delivery import DeliveryEngine, WebhookCall, WebhookRequest
from mp_webhooks.application.receipt import ReceiptEngine, ReceiverConfig
from mp_webhooks.application.tasks import AsyncioTaskScheduler, InMemoryTaskScheduler, Task, TaskScheduler

__all__ = [
    "AsyncioTaskScheduler",
    "DeliveryEngine",
    "InMemoryTaskScheduler",
    "ReceiptEngine",
    "ReceiverConfig",
    "Task",
    "TaskScheduler",
    "WebhookCall",
    "WebhookRequest",
]
