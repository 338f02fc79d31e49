"""Single-flight, time-windowed caching in front of a resource store.

``CacheGuard`` decides for each "fetch everything of type T" request whether
to answer from the records the store already holds, to hand back the fetch
that is already running for T, or to start a new fetch. It keeps one
``CacheEntry`` per resource type and is itself usable as a resource store,
so collaborators can be given the guard instead of the raw store.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from functools import partial
from typing import Any

import structlog

from storeguard.clock import Clock, SystemClock
from storeguard.config import get_settings
from storeguard.entry import CacheEntry, Pending, Resolved
from storeguard.exceptions import UnsupportedOperation
from storeguard.store import Collection, ResourceStore, TypeDescriptor


logger = structlog.get_logger(__name__)

_MISSING: Any = object()


@dataclass
class CacheStats:
    hits: int = 0
    joins: int = 0
    fetches: int = 0
    failures: int = 0
    invalidations: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


def _validate_window(cache_seconds: int) -> int:
    if cache_seconds < 0:
        raise ValueError("cache_seconds must be zero or positive")
    return cache_seconds


class CacheGuard:
    """Decorates a resource store with per-type fetch deduplication.

    Args:
        store: The store that owns the records.
        cache_seconds: Default freshness window. Falls back to the configured
            ``cache_seconds`` setting.
        clock: Whole-second time source, injectable for tests.

    If the store supports ``subscribe``, the guard listens to it so fetches
    and unloads started directly on the store update the same entries.
    """

    def __init__(
        self,
        store: ResourceStore,
        *,
        cache_seconds: int | None = None,
        clock: Clock | None = None,
    ) -> None:
        if cache_seconds is None:
            cache_seconds = get_settings().cache_seconds
        self._store = store
        self._cache_seconds = _validate_window(cache_seconds)
        self._clock = clock or SystemClock()
        self._entries: dict[str, CacheEntry] = {}
        self.stats = CacheStats()

        subscribe = getattr(store, "subscribe", None)
        self._observing = callable(subscribe)
        if self._observing:
            subscribe(self)

    @property
    def store(self) -> ResourceStore:
        return self._store

    @property
    def cache_seconds(self) -> int:
        return self._cache_seconds

    def close(self) -> None:
        """Stop listening to the wrapped store."""
        if self._observing:
            self._store.unsubscribe(self)  # type: ignore[attr-defined]
            self._observing = False

    def entry_for(self, type_key: str) -> CacheEntry:
        return self._entry(self._store.resolve_type(type_key))

    def _entry(self, descriptor: TypeDescriptor) -> CacheEntry:
        entry = self._entries.get(descriptor.name)
        if entry is None:
            entry = self._entries[descriptor.name] = CacheEntry(descriptor.name)
        return entry

    def request_all(
        self,
        type_key: str,
        id_or_query: Any = _MISSING,
        *,
        cache_seconds: int | None = None,
    ) -> Collection | asyncio.Future[Collection]:
        """Return every record of a type, fetching only when needed.

        Returns the locally held collection when the last successful fetch is
        younger than the freshness window, otherwise a future for the running
        (or newly started) fetch. Passing an id or a query raises
        ``UnsupportedOperation`` before anything is fetched.
        """
        if id_or_query is not _MISSING:
            if isinstance(id_or_query, Mapping):
                raise UnsupportedOperation(
                    "request_all does not support queries. Fetch with fetch_all and filter peek_all instead."
                )
            raise UnsupportedOperation(
                "request_all does not support finding by id. Use the store's lookup by id, "
                "which returns the local record when it is present."
            )

        descriptor = self._store.resolve_type(type_key)
        entry = self._entry(descriptor)

        pending = entry.pending_future
        if pending is not None:
            self.stats.joins += 1
            logger.debug("cache.join", type=entry.type_name)
            return pending

        window = self._cache_seconds if cache_seconds is None else _validate_window(cache_seconds)
        now = self._clock.now()
        if entry.is_fresh(now, window):
            self.stats.hits += 1
            logger.debug("cache.hit", type=entry.type_name, age_seconds=now - entry.resolved_at, window=window)
            return self._store.peek_all(type_key)

        return self.fetch_all(type_key)

    async def load_all(self, type_key: str, *, cache_seconds: int | None = None) -> Collection:
        """Awaitable form of ``request_all``."""
        result = self.request_all(type_key, cache_seconds=cache_seconds)
        if asyncio.isfuture(result):
            return await result
        return result

    def invalidate(self, type_key: str) -> None:
        """Evict local records of a type and forget when it was last fetched."""
        descriptor = self._store.resolve_type(type_key)
        self._store.unload_all(type_key)
        self._forget(descriptor)
        self.stats.invalidations += 1
        logger.info("cache.invalidated", type=descriptor.name)

    def reset_freshness(self, type_key: str) -> None:
        """Force the next request to fetch while leaving local records in place."""
        self.entry_for(type_key).reset()

    # Resource store surface

    def resolve_type(self, type_key: str) -> TypeDescriptor:
        return self._store.resolve_type(type_key)

    def peek_all(self, type_key: str) -> Collection:
        return self._store.peek_all(type_key)

    def fetch_all(self, type_key: str) -> asyncio.Future[Collection]:
        """Always fetch from the store, tracking the fetch as pending."""
        descriptor = self._store.resolve_type(type_key)
        future = asyncio.ensure_future(self._store.fetch_all(type_key))
        self._track(descriptor, future)
        return future

    def unload_all(self, type_key: str | None = None) -> None:
        descriptor = None if type_key is None else self._store.resolve_type(type_key)
        self._store.unload_all(type_key)
        self._forget(descriptor)

    # Store listener hooks

    def fetch_started(self, descriptor: TypeDescriptor, future: asyncio.Future[Collection]) -> None:
        self._track(descriptor, future)

    def unloaded(self, descriptor: TypeDescriptor | None) -> None:
        self._forget(descriptor)

    def _track(self, descriptor: TypeDescriptor, future: asyncio.Future[Collection]) -> None:
        entry = self._entry(descriptor)
        if entry.tracks(future):
            return
        entry.state = Pending(future)
        self.stats.fetches += 1
        logger.info("cache.fetch_started", type=entry.type_name)
        future.add_done_callback(partial(self._settle, entry))

    def _settle(self, entry: CacheEntry, future: asyncio.Future[Collection]) -> None:
        error: BaseException | None
        if future.cancelled():
            error = asyncio.CancelledError()
        else:
            error = future.exception()

        if not entry.tracks(future):
            logger.debug("cache.discarded", type=entry.type_name, failed=error is not None)
            return

        if error is not None:
            entry.reset()
            self.stats.failures += 1
            logger.warning("cache.fetch_failed", type=entry.type_name, error=repr(error))
            return

        entry.state = Resolved(self._clock.now())
        logger.info("cache.resolved", type=entry.type_name, at=entry.resolved_at)

    def _forget(self, descriptor: TypeDescriptor | None) -> None:
        if descriptor is None:
            for entry in self._entries.values():
                entry.reset()
            return
        self._entry(descriptor).reset()


__all__ = ["CacheGuard", "CacheStats"]
