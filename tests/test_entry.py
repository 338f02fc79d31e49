from __future__ import annotations

import asyncio

import pytest

from storeguard import CacheEntry, Idle, ManualClock, Pending, Resolved, SystemClock


def test_new_entry_is_idle() -> None:
    entry = CacheEntry("widget")
    assert entry.is_idle
    assert entry.pending_future is None
    assert entry.resolved_at is None
    assert not entry.is_fresh(now=0, window=600)


def test_resolved_freshness() -> None:
    entry = CacheEntry("widget", Resolved(at=100))
    assert entry.is_fresh(now=699, window=600)
    assert not entry.is_fresh(now=700, window=600)
    assert not entry.is_fresh(now=100, window=0)

    entry.reset()
    assert entry.state == Idle()


@pytest.mark.asyncio
async def test_pending_tracks_identity() -> None:
    loop = asyncio.get_running_loop()
    future = loop.create_future()
    other = loop.create_future()

    entry = CacheEntry("widget", Pending(future))
    assert entry.is_pending
    assert entry.tracks(future)
    assert not entry.tracks(other)
    assert not entry.is_fresh(now=0, window=600)


def test_manual_clock() -> None:
    clock = ManualClock(start=10)
    assert clock.now() == 10
    assert clock.advance(5) == 15
    clock.set(3)
    assert clock.now() == 3
    with pytest.raises(ValueError):
        clock.advance(-1)


def test_system_clock_whole_seconds() -> None:
    now = SystemClock().now()
    assert isinstance(now, int)
    assert now > 1_600_000_000
