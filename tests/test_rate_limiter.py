"""Tests for the fixed-window rate limiter."""

import asyncio
from collections import Counter

import pytest

from notes_to_notion.rate_limiter import RateLimiter
from tests.conftest import FakeClock


@pytest.mark.asyncio
async def test_acquire_within_capacity_does_not_wait():
    clock = FakeClock()
    limiter = RateLimiter(3, 1.0, clock=clock, sleep=clock.sleep)

    for _ in range(3):
        await limiter.acquire()

    assert clock.sleeps == []
    assert limiter.remaining == 0


@pytest.mark.asyncio
async def test_acquire_waits_for_next_window():
    clock = FakeClock()
    limiter = RateLimiter(2, 1.0, clock=clock, sleep=clock.sleep)

    await limiter.acquire()
    clock.now = 0.25
    await limiter.acquire()
    await limiter.acquire()

    assert clock.sleeps == [pytest.approx(0.75)]
    assert clock.now == pytest.approx(1.0)
    assert limiter.remaining == 1


@pytest.mark.asyncio
async def test_window_refills_after_idle_period():
    clock = FakeClock()
    limiter = RateLimiter(2, 1.0, clock=clock, sleep=clock.sleep)

    await limiter.acquire(2)
    clock.now = 5.5

    assert limiter.remaining == 2
    await limiter.acquire(2)
    assert clock.sleeps == []


@pytest.mark.asyncio
async def test_concurrent_acquires_never_exceed_rate():
    clock = FakeClock()
    limiter = RateLimiter(3, 1.0, clock=clock, sleep=clock.sleep)
    granted: list[float] = []

    async def worker():
        await limiter.acquire()
        granted.append(clock())

    await asyncio.gather(*(worker() for _ in range(10)))

    assert len(granted) == 10
    per_window = Counter(int(t) for t in granted)
    assert max(per_window.values()) <= 3
    assert max(granted) >= 3


@pytest.mark.asyncio
async def test_acquire_more_than_capacity_is_rejected():
    limiter = RateLimiter(3, 1.0)

    with pytest.raises(ValueError):
        await limiter.acquire(4)


def test_invalid_limits_are_rejected():
    with pytest.raises(ValueError):
        RateLimiter(0, 1.0)
    with pytest.raises(ValueError):
        RateLimiter(3, 0)


@pytest.mark.asyncio
@pytest.mark.parametrize("count", [0, -10])
async def test_acquire_non_positive_count_is_rejected(count):
    limiter = RateLimiter(3, 1.0)

    with pytest.raises(ValueError):
        await limiter.acquire(count)
    assert limiter.remaining == 3


def test_limiter_can_be_shared_across_event_loops():
    limiter = RateLimiter(2, 0.01)

    async def burst():
        await asyncio.gather(*(limiter.acquire() for _ in range(5)))

    asyncio.run(burst())
    asyncio.run(burst())

    assert limiter.remaining <= 2
