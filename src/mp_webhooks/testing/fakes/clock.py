"""Testing fakes – FakeClock factory."""
from __future__ import annotations

from datetime import UTC, datetime

from mp_webhooks.kernel.time import FrozenClock


def FakeClock(epoch_seconds: int | None = None) -> FrozenClock:
    """Return a ``FrozenClock`` pinned to 2026-01-01 12:00 UTC (or *epoch_seconds*)."""
    if epoch_seconds is not None:
        return FrozenClock.at(epoch_seconds)
    return FrozenClock(datetime(2026, 1, 1, 12, 0, tzinfo=UTC))


__all__ = ["FakeClock"]
