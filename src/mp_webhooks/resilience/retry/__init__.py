"""Resilience – backoff and jitter strategies for delivery retries."""
from mp_webhooks.resilience.retry.backoff import (
    BackoffStrategy,
    ConstantBackoffStrategy,
    ExponentialBackoffStrategy,
)
from mp_webhooks.resilience.retry.jitter import JitterStrategy, NoJitter, ProportionalJitter

__all__ = [
    "BackoffStrategy",
    "ConstantBackoffStrategy",
    "ExponentialBackoffStrategy",
    "JitterStrategy",
    "NoJitter",
    "ProportionalJitter",
]
