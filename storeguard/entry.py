"""Per-type cache entries and their fetch states."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class Idle:
    """No fetch is outstanding and nothing is known to be fresh."""


@dataclass(frozen=True)
class Pending:
    future: asyncio.Future[Any] = field(compare=False)


@dataclass(frozen=True)
class Resolved:
    at: int


EntryState = Union[Idle, Pending, Resolved]

IDLE = Idle()


@dataclass
class CacheEntry:
    """Fetch bookkeeping for a single resource type.

    The entry moves ``Idle -> Pending -> Resolved`` on a successful fetch and
    falls back to ``Idle`` on failure, invalidation or unload.
    """

    type_name: str
    state: EntryState = IDLE

    @property
    def is_idle(self) -> bool:
        return isinstance(self.state, Idle)

    @property
    def is_pending(self) -> bool:
        return isinstance(self.state, Pending)

    @property
    def pending_future(self) -> asyncio.Future[Any] | None:
        if isinstance(self.state, Pending):
            return self.state.future
        return None

    @property
    def resolved_at(self) -> int | None:
        if isinstance(self.state, Resolved):
            return self.state.at
        return None

    def is_fresh(self, now: int, window: int) -> bool:
        """Whether a resolved fetch is younger than ``window`` seconds."""
        at = self.resolved_at
        return at is not None and now - at < window

    def tracks(self, future: asyncio.Future[Any]) -> bool:
        return self.pending_future is future

    def reset(self) -> None:
        self.state = IDLE


__all__ = ["CacheEntry", "EntryState", "Idle", "Pending", "Resolved", "IDLE"]
