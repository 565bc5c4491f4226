"""Delivery errors: outbound HTTP failures, retried by the delivery engine."""

from __future__ import annotations

from typing import Any

from mp_webhooks.kernel.errors.base import WebhookError


class DeliveryError(WebhookError):
    """An outbound webhook attempt did not succeed."""

    default_code = "delivery_error"


class TransportError(DeliveryError):
    """Network, DNS or timeout failure before a response was received."""

    default_code = "transport_error"

    def __init__(self, url: str, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(message or f"Failed to dispatch webhook to: {url}", **kwargs)
        self.url = url


class HttpError(DeliveryError):
    """The receiver answered with a non-2xx status code."""

    default_code = "http_error"

    def __init__(self, url: str, status_code: int, response_body: str = "", **kwargs: Any) -> None:
        super().__init__(
            f"Webhook call to {url} failed with HTTP {status_code}: {response_body}",
            detail={"status_code": status_code},
            **kwargs,
        )
        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class MaxRetriesExceededError(DeliveryError):
    """All delivery attempts were used up (raised only when configured)."""

    default_code = "max_retries_exceeded"

    def __init__(self, max_tries: int, url: str, **kwargs: Any) -> None:
        super().__init__(
            f"Maximum retry attempts ({max_tries}) exceeded for webhook: {url}",
            detail={"max_tries": max_tries},
            **kwargs,
        )
        self.max_tries = max_tries
        self.url = url


class InvalidUrlError(DeliveryError):
    """The target URL is not an absolute http(s) URL."""

    default_code = "invalid_url"

    def __init__(self, url: str, **kwargs: Any) -> None:
        super().__init__(f"Invalid webhook URL: {url}", **kwargs)
        self.url = url


__all__ = [
    "DeliveryError",
    "HttpError",
    "InvalidUrlError",
    "MaxRetriesExceededError",
    "TransportError",
]
