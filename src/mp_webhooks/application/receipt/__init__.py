"""Application receipt – verifying, storing and processing inbound webhooks."""
from mp_webhooks.application.receipt.status import WebhookStatus
from mp_webhooks.application.receipt.record import (
    IdempotencyKey,
    InboundRequest,
    InsertResult,
    ReceivedWebhook,
    WebhookResponse,
)
from mp_webhooks.application.receipt.store import InMemoryWebhookStore, WebhookStore
from mp_webhooks.application.receipt.contracts import (
    AdmissionFilter,
    DefaultResponseBuilder,
    EventTypeFilter,
    NoopProcessor,
    ProcessEverything,
    ResponseBuilder,
    WebhookProcessor,
)
from mp_webhooks.application.receipt.config import ReceiverConfig
from mp_webhooks.application.receipt.events import (
    InvalidWebhookSignature,
    ReceiptEvent,
    WebhookProcessed,
    WebhookReceived,
)
from mp_webhooks.application.receipt.engine import PROCESS_TASK_NAME, ReceiptEngine

__all__ = [
    "AdmissionFilter",
    "DefaultResponseBuilder",
    "EventTypeFilter",
    "IdempotencyKey",
    "InMemoryWebhookStore",
    "InboundRequest",
    "InsertResult",
    "InvalidWebhookSignature",
    "NoopProcessor",
    "PROCESS_TASK_NAME",
    "ProcessEverything",
    "ReceiptEngine",
    "ReceiptEvent",
    "ReceivedWebhook",
    "ReceiverConfig",
    "ResponseBuilder",
    "WebhookProcessed",
    "WebhookProcessor",
    "WebhookReceived",
    "WebhookResponse",
    "WebhookStatus",
    "WebhookStore",
]
