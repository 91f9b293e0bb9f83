"""Process-wide cache for data derived from external APIs."""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Protocol, TypeVar

from ..logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Loader = Callable[[], Awaitable[T]]


class IDerivedDataCache(Protocol):
    """Shared, lazily populated cache with per-entry expiry."""

    async def get_or_load(self, key: str, loader: Loader, ttl: float) -> Any:
        """Return the cached value, loading it on miss or expiry."""
        ...

    def clear(self) -> None:
        """Drop every entry."""
        ...


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


class DerivedDataCache:
    """In-memory TTL cache with a single-flight guard per key.

    Concurrent misses on the same key wait for one load instead of each
    calling the loader.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def get(self, key: str) -> Any | None:
        """Get value if present and not expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() >= entry.expires_at:
            del self._entries[key]
            logger.info("Cache entry %s expired, it will refresh on next use", key)
            return None

        return entry.value

    def put(self, key: str, value: Any, ttl: float) -> None:
        """Set a value with a TTL in seconds."""
        self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)

    async def get_or_load(self, key: str, loader: Loader, ttl: float) -> Any:
        """Return the cached value, loading it on miss or expiry.

        Loader errors propagate and leave the cache untouched.
        """
        value = self.get(key)
        if value is not None:
            return value

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            # Another task may have loaded it while we waited.
            value = self.get(key)
            if value is not None:
                return value

            logger.debug("Cache miss for %s, loading", key)
            value = await loader()
            self.put(key, value, ttl)
            return value

    def invalidate(self, key: str) -> bool:
        """Delete a key, returning whether it was present."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()
