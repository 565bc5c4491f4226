"""Kernel error hierarchy: public re-export surface.

Hierarchy::

    BaseError
    └── WebhookError
        ├── VerificationError          (verification.py)
        │   ├── InvalidSignatureError
        │   └── InvalidTimestampError
        │       ├── FutureTimestampError
        │       └── ExpiredTimestampError
        ├── InvalidKeyMaterialError    (verification.py)
        ├── DeliveryError              (delivery.py)
        │   ├── TransportError
        │   ├── HttpError
        │   ├── MaxRetriesExceededError
        │   └── InvalidUrlError
        ├── ProcessingError            (processing.py)
        ├── WebhookNotFoundError
        └── InvalidStatusTransitionError
"""

from mp_webhooks.kernel.errors.base import BaseError, WebhookError
from mp_webhooks.kernel.errors.delivery import (
    DeliveryError,
    HttpError,
    InvalidUrlError,
    MaxRetriesExceededError,
    TransportError,
)
from mp_webhooks.kernel.errors.processing import (
    InvalidStatusTransitionError,
    ProcessingError,
    WebhookNotFoundError,
)
from mp_webhooks.kernel.errors.verification import (
    ExpiredTimestampError,
    FutureTimestampError,
    InvalidKeyMaterialError,
    InvalidSignatureError,
    InvalidTimestampError,
    VerificationError,
)

__all__ = [
    "BaseError",
    "DeliveryError",
    "ExpiredTimestampError",
    "FutureTimestampError",
    "HttpError",
    "InvalidKeyMaterialError",
    "InvalidSignatureError",
    "InvalidStatusTransitionError",
    "InvalidTimestampError",
    "InvalidUrlError",
    "MaxRetriesExceededError",
    "ProcessingError",
    "TransportError",
    "VerificationError",
    "WebhookError",
    "WebhookNotFoundError",
]
