"""Protocol – timestamp freshness checks (replay protection)."""
from __future__ import annotations

from mp_webhooks.kernel.errors import (
    ExpiredTimestampError,
    FutureTimestampError,
    InvalidTimestampError,
)
from mp_webhooks.kernel.time import Clock, SystemClock

DEFAULT_TOLERANCE_SECONDS = 300


class TimestampValidator:
    """Reject webhook timestamps outside ``[now - tolerance, now]``.

    Both edges are inclusive: a timestamp equal to *now* and one exactly
    ``tolerance_seconds`` old are accepted.
    """

    def __init__(
        self,
        tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
        clock: Clock | None = None,
    ) -> None:
        if tolerance_seconds < 0:
            raise ValueError("tolerance_seconds must be >= 0")
        self._tolerance = tolerance_seconds
        self._clock = clock or SystemClock()

    @property
    def tolerance_seconds(self) -> int:
        return self._tolerance

    def generate(self) -> int:
        """Current Unix timestamp according to this validator's clock."""
        return self._clock.epoch_seconds()

    def validate(self, timestamp: int) -> None:
        now = self._clock.epoch_seconds()
        age = now - timestamp
        if age < 0:
            raise FutureTimestampError(timestamp, now)
        if age > self._tolerance:
            raise ExpiredTimestampError(timestamp, now, self._tolerance)

    def is_valid(self, timestamp: int) -> bool:
        try:
            self.validate(timestamp)
        except InvalidTimestampError:
            return False
        return True


__all__ = ["DEFAULT_TOLERANCE_SECONDS", "TimestampValidator"]
