"""Application delivery – outbound request descriptor and per-attempt record."""
from __future__ import annotations

import dataclasses
import json
from enum import Enum
from typing import Any, Mapping

from mp_webhooks.kernel.types import generate_webhook_id
from mp_webhooks.protocol import Signer
from mp_webhooks.resilience import BackoffStrategy

__all__ = ["DeliveryAttempt", "DeliveryOutcome", "DeliveryState", "WebhookRequest"]


@dataclasses.dataclass(frozen=True)
class WebhookRequest:
    """Immutable description of one webhook to deliver.

    ``timestamp`` is fixed the first time the request reaches the engine and
    reused by every retry, since it is part of the signed content.
    ``signer`` and ``backoff`` override the engine defaults for this request.
    """

    url: str
    payload: Any = dataclasses.field(default_factory=dict)
    webhook_id: str = dataclasses.field(default_factory=generate_webhook_id)
    timestamp: int | None = None
    http_verb: str = "POST"
    headers: Mapping[str, str] = dataclasses.field(default_factory=dict)
    meta: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    tags: tuple[str, ...] = ()
    timeout_seconds: float = 3
    verify_tls: bool = True
    max_tries: int = 3
    throw_on_failure: bool = False
    content_type: str = "application/json"
    signer: Signer | None = None
    backoff: BackoffStrategy | None = None

    def __post_init__(self) -> None:
        if self.max_tries < 1:
            raise ValueError("max_tries must be >= 1")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")

    def body(self) -> bytes:
        """Encode the payload exactly once; these bytes are both signed and sent."""
        if isinstance(self.payload, bytes):
            return self.payload
        if isinstance(self.payload, str):
            return self.payload.encode("utf-8")
        return json.dumps(self.payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")

    def all_tags(self) -> tuple[str, ...]:
        return (*self.tags, "webhook", f"webhook:{self.webhook_id}")

    def with_timestamp(self, timestamp: int) -> "WebhookRequest":
        return dataclasses.replace(self, timestamp=timestamp)


class DeliveryState(str, Enum):
    PENDING = "pending"
    DISPATCHING = "dispatching"
    SUCCEEDED = "succeeded"
    RETRY_SCHEDULED = "retry_scheduled"
    TERMINALLY_FAILED = "terminally_failed"

    def is_terminal(self) -> bool:
        return self in (DeliveryState.SUCCEEDED, DeliveryState.TERMINALLY_FAILED)


class DeliveryOutcome(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclasses.dataclass(frozen=True)
class DeliveryAttempt:
    """Result of one dispatch; transient, discarded after the events fire."""

    webhook_id: str
    url: str
    http_verb: str
    attempt_number: int
    state: DeliveryState = DeliveryState.PENDING
    http_status: int | None = None
    error: str | None = None
    retry_delay: int | None = None

    @property
    def outcome(self) -> DeliveryOutcome:
        if self.state is DeliveryState.SUCCEEDED:
            return DeliveryOutcome.SUCCEEDED
        if self.state in (DeliveryState.RETRY_SCHEDULED, DeliveryState.TERMINALLY_FAILED):
            return DeliveryOutcome.FAILED
        return DeliveryOutcome.PENDING
