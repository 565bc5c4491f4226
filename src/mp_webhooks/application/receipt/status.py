"""Application receipt – processing status state machine."""
from __future__ import annotations

from enum import Enum

__all__ = ["WebhookStatus"]


class WebhookStatus(str, Enum):
    """``pending -> processing -> {processed, failed}``; ``failed -> processing`` on manual retry."""

    PENDING = "pending"
    PROCESSING = "processing"
    PROCESSED = "processed"
    FAILED = "failed"

    def is_terminal(self) -> bool:
        return self in (WebhookStatus.PROCESSED, WebhookStatus.FAILED)

    def can_process(self) -> bool:
        """Pending records and failed ones (retry) may be processed."""
        return self in (WebhookStatus.PENDING, WebhookStatus.FAILED)

    def can_transition_to(self, target: "WebhookStatus") -> bool:
        return target in _TRANSITIONS[self]


_TRANSITIONS: dict[WebhookStatus, frozenset[WebhookStatus]] = {
    WebhookStatus.PENDING: frozenset({WebhookStatus.PROCESSING}),
    WebhookStatus.PROCESSING: frozenset({WebhookStatus.PROCESSED, WebhookStatus.FAILED}),
    WebhookStatus.PROCESSED: frozenset(),
    WebhookStatus.FAILED: frozenset({WebhookStatus.PROCESSING}),
}
