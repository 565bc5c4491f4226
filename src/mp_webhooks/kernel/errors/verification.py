"""Verification errors: signature, timestamp and key material failures.

None of these are retried: a request that fails verification is malformed or
malicious and sending it again changes nothing.
"""

from __future__ import annotations

from typing import Any

from mp_webhooks.kernel.errors.base import WebhookError


class VerificationError(WebhookError):
    """An inbound webhook could not be authenticated."""

    default_code = "verification_failed"


class InvalidSignatureError(VerificationError):
    """No candidate signature matched the expected one."""

    default_code = "invalid_signature"

    def __init__(self, webhook_id: str | None, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(
            message or f"Invalid webhook signature for webhook ID: {webhook_id}",
            detail={"webhook_id": webhook_id},
            **kwargs,
        )
        self.webhook_id = webhook_id


class InvalidTimestampError(VerificationError):
    """The ``webhook-timestamp`` header is missing, malformed or out of tolerance."""

    default_code = "invalid_timestamp"


class FutureTimestampError(InvalidTimestampError):
    """Timestamp lies ahead of the receiver's clock."""

    default_code = "future_timestamp"

    def __init__(self, timestamp: int, now: int, **kwargs: Any) -> None:
        super().__init__(
            f"Webhook timestamp ({timestamp}) is in the future (current: {now})",
            detail={"timestamp": timestamp, "now": now},
            **kwargs,
        )
        self.timestamp = timestamp
        self.now = now


class ExpiredTimestampError(InvalidTimestampError):
    """Timestamp is older than the tolerance window (stale or replayed)."""

    default_code = "expired_timestamp"

    def __init__(self, timestamp: int, now: int, tolerance: int, **kwargs: Any) -> None:
        age = now - timestamp
        super().__init__(
            f"Webhook timestamp ({timestamp}) is too old. Age: {age}s, Tolerance: {tolerance}s",
            detail={"timestamp": timestamp, "now": now, "tolerance": tolerance, "age": age},
            **kwargs,
        )
        self.timestamp = timestamp
        self.now = now
        self.tolerance = tolerance


class InvalidKeyMaterialError(WebhookError):
    """A signer or validator was configured with an undecodable key or secret."""

    default_code = "invalid_key_material"


__all__ = [
    "ExpiredTimestampError",
    "FutureTimestampError",
    "InvalidKeyMaterialError",
    "InvalidSignatureError",
    "InvalidTimestampError",
    "VerificationError",
]
