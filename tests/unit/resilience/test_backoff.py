"""Unit tests for backoff strategies."""
from __future__ import annotations

import random

import pytest

from mp_webhooks.resilience import ConstantBackoffStrategy, ExponentialBackoffStrategy
from mp_webhooks.resilience.retry.jitter import NoJitter, ProportionalJitter


# ---------------------------------------------------------------------------
# ExponentialBackoffStrategy
# ---------------------------------------------------------------------------
class TestExponentialBackoff:
    def test_doubles_without_jitter(self):
        s = ExponentialBackoffStrategy(use_jitter=False)
        assert [s.calculate(n) for n in range(1, 7)] == [1, 2, 4, 8, 16, 32]

    def test_capped_at_max(self):
        s = ExponentialBackoffStrategy(base_delay_seconds=10, max_delay_seconds=60, use_jitter=False)
        assert [s.calculate(n) for n in range(1, 6)] == [10, 20, 40, 60, 60]

    def test_default_max_is_one_hour(self):
        s = ExponentialBackoffStrategy(use_jitter=False)
        assert s.calculate(50) == 3600

    def test_huge_attempt_numbers(self):
        s = ExponentialBackoffStrategy(use_jitter=False)
        assert s.calculate(10_000) == 3600

    def test_non_decreasing_and_bounded_without_jitter(self):
        s = ExponentialBackoffStrategy(base_delay_seconds=3, max_delay_seconds=500, use_jitter=False)
        delays = [s.calculate(n) for n in range(1, 30)]
        assert delays == sorted(delays)
        assert max(delays) <= 500

    def test_jitter_within_quarter(self):
        s = ExponentialBackoffStrategy(rng=random.Random(7))
        for attempt in range(1, 15):
            base = min(2 ** (attempt - 1), 3600)
            for _ in range(20):
                delay = s.calculate(attempt)
                assert base <= delay <= base + base // 4

    def test_jitter_zero_for_small_delays(self):
        s = ExponentialBackoffStrategy(rng=random.Random(1))
        # floor(1 * 0.25) == 0, so attempt 1 never jitters
        assert {s.calculate(1) for _ in range(50)} == {1}

    @pytest.mark.parametrize("attempt", [0, -1])
    def test_attempt_must_be_positive(self, attempt):
        with pytest.raises(ValueError):
            ExponentialBackoffStrategy().calculate(attempt)

    def test_negative_delays_rejected(self):
        with pytest.raises(ValueError):
            ExponentialBackoffStrategy(base_delay_seconds=-1)


# ---------------------------------------------------------------------------
# Constant + jitter primitives
# ---------------------------------------------------------------------------
class TestConstantAndJitter:
    def test_constant(self):
        s = ConstantBackoffStrategy(5)
        assert [s.calculate(n) for n in (1, 2, 10)] == [5, 5, 5]

    def test_constant_validates_attempt(self):
        with pytest.raises(ValueError):
            ConstantBackoffStrategy().calculate(0)

    def test_no_jitter(self):
        assert NoJitter().apply(10) == 10

    def test_proportional_jitter_bounds(self):
        j = ProportionalJitter(0.5, random.Random(3))
        assert all(100 <= j.apply(100) <= 150 for _ in range(100))

    def test_negative_ratio_rejected(self):
        with pytest.raises(ValueError):
            ProportionalJitter(-0.1)
