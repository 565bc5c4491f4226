"""Application receipt – stored webhook record and HTTP-agnostic request/response."""
from __future__ import annotations

import dataclasses
import json
from datetime import datetime
from enum import Enum
from typing import Any, Mapping

from mp_webhooks.application.receipt.status import WebhookStatus
from mp_webhooks.kernel.time import utc_now
from mp_webhooks.protocol.wire import get_header

__all__ = [
    "IdempotencyKey",
    "InboundRequest",
    "InsertResult",
    "ReceivedWebhook",
    "WebhookResponse",
]


@dataclasses.dataclass(frozen=True)
class IdempotencyKey:
    """``(config_name, webhook_id)`` – unique per receiving endpoint."""

    config_name: str
    webhook_id: str

    def __str__(self) -> str:
        return f"{self.config_name}:{self.webhook_id}"


@dataclasses.dataclass(frozen=True)
class ReceivedWebhook:
    """A verified inbound webhook as persisted by a :class:`WebhookStore`.

    ``payload`` is the raw request body; it is never re-serialised.
    """

    config_name: str
    webhook_id: str
    timestamp: int
    payload: bytes
    headers: Mapping[str, str] = dataclasses.field(default_factory=dict)
    status: WebhookStatus = WebhookStatus.PENDING
    attempts: int = 0
    last_error: str | None = None
    processed_at: datetime | None = None
    received_at: datetime = dataclasses.field(default_factory=utc_now)

    @property
    def key(self) -> IdempotencyKey:
        return IdempotencyKey(self.config_name, self.webhook_id)

    def json(self) -> Any:
        """Decode the payload as JSON (raises ``ValueError`` when it is not JSON)."""
        return json.loads(self.payload)

    def with_status(
        self,
        status: WebhookStatus,
        *,
        error: str | None = None,
        processed_at: datetime | None = None,
        attempts: int | None = None,
    ) -> "ReceivedWebhook":
        return dataclasses.replace(
            self,
            status=status,
            last_error=error,
            processed_at=processed_at,
            attempts=self.attempts if attempts is None else attempts,
        )


class InsertResult(str, Enum):
    OK = "ok"
    DUPLICATE = "duplicate"


@dataclasses.dataclass(frozen=True)
class InboundRequest:
    """Framework-neutral view of an incoming HTTP request."""

    headers: Mapping[str, str]
    body: bytes
    method: str = "POST"
    path: str = ""

    def header(self, name: str) -> str | None:
        return get_header(self.headers, name)


@dataclasses.dataclass(frozen=True)
class WebhookResponse:
    status_code: int
    body: str = ""
    headers: Mapping[str, str] = dataclasses.field(default_factory=dict)
