"""Application delivery – signing, sending and retrying outbound webhooks."""
from mp_webhooks.application.delivery.request import (
    DeliveryAttempt,
    DeliveryOutcome,
    DeliveryState,
    WebhookRequest,
)
from mp_webhooks.application.delivery.transport import HttpTransport, TransportResponse
from mp_webhooks.application.delivery.events import (
    DeliveryEvent,
    DispatchingWebhookCall,
    FinalWebhookCallFailed,
    WebhookCallFailed,
    WebhookCallSucceeded,
)
from mp_webhooks.application.delivery.engine import DELIVERY_TASK_NAME, DeliveryEngine, build_headers
from mp_webhooks.application.delivery.call import WebhookCall

__all__ = [
    "DELIVERY_TASK_NAME",
    "DeliveryAttempt",
    "DeliveryEngine",
    "DeliveryEvent",
    "DeliveryOutcome",
    "DeliveryState",
    "DispatchingWebhookCall",
    "FinalWebhookCallFailed",
    "HttpTransport",
    "TransportResponse",
    "WebhookCall",
    "WebhookCallFailed",
    "WebhookCallSucceeded",
    "WebhookRequest",
    "build_headers",
]
