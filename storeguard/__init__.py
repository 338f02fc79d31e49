"""storeguard package exports."""

from storeguard.clock import ManualClock, SystemClock
from storeguard.config import get_settings
from storeguard.entry import CacheEntry, Idle, Pending, Resolved
from storeguard.exceptions import FetchFailed, StoreGuardError, UnknownResourceType, UnsupportedOperation
from storeguard.guard import CacheGuard, CacheStats
from storeguard.store import MemoryStore, ResourceStore, TypeDescriptor

__all__ = [
    "CacheEntry",
    "CacheGuard",
    "CacheStats",
    "FetchFailed",
    "Idle",
    "ManualClock",
    "MemoryStore",
    "Pending",
    "Resolved",
    "ResourceStore",
    "StoreGuardError",
    "SystemClock",
    "TypeDescriptor",
    "UnknownResourceType",
    "UnsupportedOperation",
    "get_settings",
]
