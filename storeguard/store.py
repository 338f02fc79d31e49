"""Resource store protocol and an observable in-memory store.

Stores own the records. The cache guard only needs four capabilities from
them: fetch everything of a type, read what is held locally, evict what is
held locally, and map a type key onto the store's canonical type.

``MemoryStore`` additionally tells subscribed listeners whenever a fetch
starts or records are unloaded, so bookkeeping layered on top of it stays
consistent even when other code drives the store directly.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Protocol

import structlog

from storeguard.exceptions import FetchFailed, UnknownResourceType


logger = structlog.get_logger(__name__)

Collection = list[Any]


@dataclass(frozen=True)
class TypeDescriptor:
    name: str
    path: str


Loader = Callable[[TypeDescriptor], Awaitable[Iterable[Any]]]


class ResourceStore(Protocol):
    def fetch_all(self, type_key: str) -> Awaitable[Collection]: ...

    def peek_all(self, type_key: str) -> Collection: ...

    def unload_all(self, type_key: str | None = None) -> None: ...

    def resolve_type(self, type_key: str) -> TypeDescriptor: ...


class StoreListener(Protocol):
    def fetch_started(self, descriptor: TypeDescriptor, future: asyncio.Future[Collection]) -> None: ...

    def unloaded(self, descriptor: TypeDescriptor | None) -> None: ...


_SEPARATORS = re.compile(r"[\s_]+")


def normalize_type_key(type_key: str) -> str:
    """Lowercase a type key and dasherize spaces and underscores."""
    return _SEPARATORS.sub("-", type_key.strip().lower())


class MemoryStore:
    """Observable store holding records per type in memory.

    Types must be registered before use. Each type may carry its own async
    loader; subclasses can instead override ``_load`` to fetch every type
    the same way.
    """

    def __init__(self) -> None:
        self._types: dict[str, TypeDescriptor] = {}
        self._loaders: dict[str, Loader] = {}
        self._records: dict[str, Collection] = {}
        self._listeners: list[StoreListener] = []

    def register(
        self,
        name: str,
        loader: Loader | None = None,
        *,
        path: str | None = None,
    ) -> TypeDescriptor:
        key = normalize_type_key(name)
        if not key:
            raise ValueError("Resource type name must not be empty")
        descriptor = TypeDescriptor(name=key, path=(path or f"{key}s").strip("/"))
        self._types[key] = descriptor
        if loader is not None:
            self._loaders[key] = loader
        return descriptor

    def resolve_type(self, type_key: str) -> TypeDescriptor:
        key = normalize_type_key(type_key)
        descriptor = self._types.get(key)
        if descriptor is None and key.endswith("s"):
            descriptor = self._types.get(key[:-1])
        if descriptor is None:
            raise UnknownResourceType(type_key)
        return descriptor

    def subscribe(self, listener: StoreListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: StoreListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def fetch_all(self, type_key: str) -> asyncio.Future[Collection]:
        """Start loading every record of a type and return the running task.

        Must be called with a running event loop. Listeners are told about
        the fetch before this method returns.
        """
        descriptor = self.resolve_type(type_key)
        future = asyncio.get_running_loop().create_task(self._fetch(descriptor))
        logger.debug("store.fetch_started", type=descriptor.name)
        for listener in list(self._listeners):
            listener.fetch_started(descriptor, future)
        return future

    async def _fetch(self, descriptor: TypeDescriptor) -> Collection:
        records = list(await self._load(descriptor))
        self._records[descriptor.name] = records
        return list(records)

    async def _load(self, descriptor: TypeDescriptor) -> Iterable[Any]:
        loader = self._loaders.get(descriptor.name)
        if loader is None:
            raise FetchFailed(f"No loader configured for {descriptor.name!r}")
        return await loader(descriptor)

    def peek_all(self, type_key: str) -> Collection:
        descriptor = self.resolve_type(type_key)
        return list(self._records.get(descriptor.name, []))

    def push(self, type_key: str, records: Iterable[Any]) -> Collection:
        """Add records locally without fetching them."""
        descriptor = self.resolve_type(type_key)
        held = self._records.setdefault(descriptor.name, [])
        held.extend(records)
        return list(held)

    def unload_all(self, type_key: str | None = None) -> None:
        """Evict local records of one type, or of every type when no key is given."""
        if type_key is None:
            descriptor = None
            self._records.clear()
        else:
            descriptor = self.resolve_type(type_key)
            self._records.pop(descriptor.name, None)
        logger.debug("store.unloaded", type=descriptor.name if descriptor else None)
        for listener in list(self._listeners):
            listener.unloaded(descriptor)


__all__ = [
    "Collection",
    "Loader",
    "MemoryStore",
    "ResourceStore",
    "StoreListener",
    "TypeDescriptor",
    "normalize_type_key",
]
