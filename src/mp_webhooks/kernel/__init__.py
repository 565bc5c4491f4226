"""Kernel – framework-agnostic building blocks (errors, time, identifiers)."""

from mp_webhooks.kernel.errors import (
    BaseError,
    DeliveryError,
    ProcessingError,
    VerificationError,
    WebhookError,
)
from mp_webhooks.kernel.time import Clock, FrozenClock, SystemClock

__all__ = [
    "BaseError",
    "Clock",
    "DeliveryError",
    "FrozenClock",
    "ProcessingError",
    "SystemClock",
    "VerificationError",
    "WebhookError",
]
