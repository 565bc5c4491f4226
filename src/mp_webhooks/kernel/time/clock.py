"""Kernel time – Clock protocol + implementations.

Webhook timestamps are whole Unix seconds, so every clock exposes
``epoch_seconds()`` next to the aware ``now()``.
"""
from __future__ import annotations

import time
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Port: abstract clock for deterministic testing."""

    def now(self) -> datetime: ...
    def epoch_seconds(self) -> int: ...
    def monotonic(self) -> float: ...


class SystemClock:
    """Production clock that delegates to ``datetime.now(UTC)``."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def epoch_seconds(self) -> int:
        return int(datetime.now(UTC).timestamp())

    def monotonic(self) -> float:
        return time.monotonic()


class FrozenClock:
    """Test clock pinned to a fixed point in time."""

    def __init__(self, fixed: datetime) -> None:
        if fixed.tzinfo is None:
            fixed = fixed.replace(tzinfo=UTC)
        self._fixed = fixed

    @classmethod
    def at(cls, epoch_seconds: int) -> "FrozenClock":
        """Return a clock frozen at the given Unix timestamp."""
        return cls(datetime.fromtimestamp(epoch_seconds, tz=UTC))

    def now(self) -> datetime:
        return self._fixed

    def epoch_seconds(self) -> int:
        return int(self._fixed.timestamp())

    def monotonic(self) -> float:
        return self._fixed.timestamp()

    def advance(self, **kwargs: int | float) -> None:
        """Advance the frozen time by the given ``timedelta`` kwargs."""
        self._fixed += timedelta(**kwargs)

    def set(self, epoch_seconds: int) -> None:
        """Jump to an absolute Unix timestamp."""
        self._fixed = datetime.fromtimestamp(epoch_seconds, tz=UTC)


def utc_now() -> datetime:
    """Shorthand for ``datetime.now(UTC)``."""
    return datetime.now(UTC)


__all__ = ["Clock", "FrozenClock", "SystemClock", "utc_now"]
