"""Resilience – jitter strategies for integer-second retry delays."""
from __future__ import annotations

import abc
import random


class JitterStrategy(abc.ABC):
    """Apply randomness to a backoff delay to spread synchronized retries."""

    @abc.abstractmethod
    def apply(self, delay: int) -> int: ...


class NoJitter(JitterStrategy):
    def apply(self, delay: int) -> int:
        return delay


class ProportionalJitter(JitterStrategy):
    """Add a random integer in ``[0, floor(delay * ratio)]`` (default ratio 0.25)."""

    def __init__(self, ratio: float = 0.25, rng: random.Random | None = None) -> None:
        if ratio < 0:
            raise ValueError("ratio must be >= 0")
        self._ratio = ratio
        self._rng = rng or random.Random()

    def apply(self, delay: int) -> int:
        return delay + self._rng.randint(0, int(delay * self._ratio))


__all__ = ["JitterStrategy", "NoJitter", "ProportionalJitter"]
