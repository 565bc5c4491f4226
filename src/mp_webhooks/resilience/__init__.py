"""Resilience – retry backoff used by outbound delivery."""

from mp_webhooks.resilience.retry import (
    BackoffStrategy,
    ConstantBackoffStrategy,
    ExponentialBackoffStrategy,
)

__all__ = ["BackoffStrategy", "ConstantBackoffStrategy", "ExponentialBackoffStrategy"]
