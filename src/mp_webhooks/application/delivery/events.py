"""Application delivery – outbound lifecycle events."""
from __future__ import annotations

import dataclasses
from typing import Any, ClassVar, Mapping

from mp_webhooks.observability.events import WebhookEvent

__all__ = [
    "DeliveryEvent",
    "DispatchingWebhookCall",
    "FinalWebhookCallFailed",
    "WebhookCallFailed",
    "WebhookCallSucceeded",
]


@dataclasses.dataclass(frozen=True, kw_only=True)
class DeliveryEvent(WebhookEvent):
    name: ClassVar[str] = "webhook.delivery"

    webhook_id: str
    url: str
    meta: Mapping[str, Any] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True, kw_only=True)
class DispatchingWebhookCall(DeliveryEvent):
    """Fired right before the HTTP request of every attempt."""

    name: ClassVar[str] = "webhook.dispatching"

    attempt: int
    payload: Any
    headers: Mapping[str, str]


@dataclasses.dataclass(frozen=True, kw_only=True)
class WebhookCallSucceeded(DeliveryEvent):
    name: ClassVar[str] = "webhook.succeeded"

    status_code: int
    attempt: int


@dataclasses.dataclass(frozen=True, kw_only=True)
class WebhookCallFailed(DeliveryEvent):
    """Fired for every failed attempt, including the last one."""

    name: ClassVar[str] = "webhook.failed"

    attempt: int
    error: BaseException
    http_status: int | None = None


@dataclasses.dataclass(frozen=True, kw_only=True)
class FinalWebhookCallFailed(DeliveryEvent):
    """Fired once, after the last allowed attempt failed."""

    name: ClassVar[str] = "webhook.final_failed"

    total_attempts: int
    last_error: BaseException
