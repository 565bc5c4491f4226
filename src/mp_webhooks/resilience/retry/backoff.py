"""Resilience – backoff strategies mapping a 1-indexed attempt to a delay in seconds."""
from __future__ import annotations

import abc
import random

from mp_webhooks.resilience.retry.jitter import JitterStrategy, NoJitter, ProportionalJitter


class BackoffStrategy(abc.ABC):
    """Compute the wait (seconds) before retrying after the *attempt*-th failure."""

    @abc.abstractmethod
    def calculate(self, attempt: int) -> int: ...

    @staticmethod
    def _check_attempt(attempt: int) -> None:
        if attempt < 1:
            raise ValueError(f"attempt must be >= 1, got {attempt}")


class ConstantBackoffStrategy(BackoffStrategy):
    """Fixed delay between attempts."""

    def __init__(self, delay_seconds: int = 1) -> None:
        self._delay = delay_seconds

    def calculate(self, attempt: int) -> int:
        self._check_attempt(attempt)
        return self._delay


class ExponentialBackoffStrategy(BackoffStrategy):
    """``min(base * 2^(attempt-1), max_delay)`` plus up to 25% random jitter.

    Without jitter the sequence is non-decreasing and never exceeds
    ``max_delay_seconds``.
    """

    def __init__(
        self,
        base_delay_seconds: int = 1,
        max_delay_seconds: int = 3_600,
        use_jitter: bool = True,
        *,
        rng: random.Random | None = None,
    ) -> None:
        if base_delay_seconds < 0 or max_delay_seconds < 0:
            raise ValueError("delays must be >= 0")
        self._base = base_delay_seconds
        self._max = max_delay_seconds
        self._jitter: JitterStrategy = ProportionalJitter(0.25, rng) if use_jitter else NoJitter()

    def calculate(self, attempt: int) -> int:
        self._check_attempt(attempt)
        # exponent capped at 64
        exponent = min(attempt - 1, 64)
        delay = min(self._base * (2 ** exponent), self._max)
        return self._jitter.apply(delay)


__all__ = ["BackoffStrategy", "ConstantBackoffStrategy", "ExponentialBackoffStrategy"]
