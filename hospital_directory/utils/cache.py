"""In-process TTL cache for raw content-store fetches.

Entries expire on read; there is no explicit invalidation because nothing in
this service writes to the content store.
"""
import asyncio
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from hospital_directory.core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Entry:
    value: Any
    expires_at: Optional[float]


class TTLCache:
    def __init__(
        self,
        ttl_seconds: float = 600.0,
        max_size: int = 1024,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._max_size = max(1, int(max_size))
        self._clock = clock
        self._lock = threading.Lock()
        self._items: "OrderedDict[str, _Entry]" = OrderedDict()
        self._pending: Dict[str, "asyncio.Future[Any]"] = {}

    def get(self, key: str) -> Optional[Any]:
        now = self._clock()
        with self._lock:
            entry = self._items.get(key)
            if entry is None:
                return None
            if entry.expires_at is not None and entry.expires_at <= now:
                self._items.pop(key, None)
                logger.debug(f"⌛ Cache entry expired: {key}")
                return None
            self._items.move_to_end(key)
            return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store ``value``; ``ttl`` overrides the cache default, ``<= 0`` never expires."""
        ttl = self.ttl_seconds if ttl is None else ttl
        expires_at = self._clock() + ttl if ttl and ttl > 0 else None

        with self._lock:
            self._items.pop(key, None)
            self._items[key] = _Entry(value=value, expires_at=expires_at)
            while len(self._items) > self._max_size:
                self._items.popitem(last=False)

    async def get_or_load(
        self,
        key: str,
        loader: Callable[[], Awaitable[Any]],
        ttl: Optional[float] = None,
    ) -> Any:
        """Cached value for ``key``, else the result of ``loader``.

        Concurrent misses on the same key share one in-flight load.
        """
        value = self.get(key)
        if value is not None:
            logger.debug(f"♻️ Cache hit for {key}")
            return value

        pending = self._pending.get(key)
        if pending is None:
            pending = asyncio.ensure_future(self._load(key, loader, ttl))
            self._pending[key] = pending
        else:
            logger.debug(f"🔁 Joining in-flight load for {key}")
        return await asyncio.shield(pending)

    async def _load(self, key: str, loader: Callable[[], Awaitable[Any]], ttl: Optional[float]) -> Any:
        try:
            value = await loader()
            self.set(key, value, ttl)
            return value
        finally:
            self._pending.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


_cache = TTLCache(ttl_seconds=settings.cache_ttl_seconds)


def get_cache() -> TTLCache:
    return _cache
