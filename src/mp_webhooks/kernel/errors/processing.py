"""Processing errors: inbound handling failures after verification."""

from __future__ import annotations

from typing import Any

from mp_webhooks.kernel.errors.base import WebhookError


class ProcessingError(WebhookError):
    """The processor collaborator failed to handle a received webhook."""

    default_code = "processing_error"


class WebhookNotFoundError(WebhookError):
    """No stored webhook exists for the given idempotency key."""

    default_code = "webhook_not_found"

    def __init__(self, webhook_id: str, config_name: str | None = None, **kwargs: Any) -> None:
        super().__init__(f"Webhook not found: {webhook_id}", **kwargs)
        self.webhook_id = webhook_id
        self.config_name = config_name


class InvalidStatusTransitionError(WebhookError):
    """A status change is not allowed by the receipt state machine."""

    default_code = "invalid_status_transition"

    def __init__(self, current: str, target: str, **kwargs: Any) -> None:
        super().__init__(f"Cannot move webhook from '{current}' to '{target}'", **kwargs)
        self.current = current
        self.target = target


__all__ = ["InvalidStatusTransitionError", "ProcessingError", "WebhookNotFoundError"]
