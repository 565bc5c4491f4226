"""Application receipt – inbound lifecycle events."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from mp_webhooks.application.receipt.record import InboundRequest, ReceivedWebhook
from mp_webhooks.observability.events import WebhookEvent

__all__ = ["InvalidWebhookSignature", "ReceiptEvent", "WebhookProcessed", "WebhookReceived"]


@dataclasses.dataclass(frozen=True, kw_only=True)
class ReceiptEvent(WebhookEvent):
    name: ClassVar[str] = "webhook.receipt"

    config_name: str


@dataclasses.dataclass(frozen=True, kw_only=True)
class InvalidWebhookSignature(ReceiptEvent):
    """Verification failed; nothing was stored."""

    name: ClassVar[str] = "webhook.invalid_signature"

    request: InboundRequest
    error: BaseException


@dataclasses.dataclass(frozen=True, kw_only=True)
class WebhookReceived(ReceiptEvent):
    name: ClassVar[str] = "webhook.received"

    webhook: ReceivedWebhook


@dataclasses.dataclass(frozen=True, kw_only=True)
class WebhookProcessed(ReceiptEvent):
    name: ClassVar[str] = "webhook.processed"

    webhook: ReceivedWebhook
