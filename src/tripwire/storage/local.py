"""Process-wide TTL cache storage built on ``cachetools``.

Every ``LocalCacheStorage`` created with the same ``(ttl, max_entries)``
shares one cache, so statuses written by one breaker instance are seen by
any other instance in the same process. A ``ttl`` of 0 or less means
entries never expire, as with Redis.
"""

from __future__ import annotations

import threading
from collections.abc import MutableMapping

from cachetools import Cache, LRUCache, TTLCache

from tripwire.exceptions import StorageError
from tripwire.storage.base import DEFAULT_TTL_SECONDS, BaseCacheStorage

_shared_caches: dict[tuple[int, int], Cache] = {}
_shared_lock = threading.RLock()


def _shared_cache(ttl: int, max_entries: int) -> Cache:
    with _shared_lock:
        cache = _shared_caches.get((ttl, max_entries))
        if cache is None:
            if ttl > 0:
                cache = TTLCache(maxsize=max_entries, ttl=ttl)
            else:
                cache = LRUCache(maxsize=max_entries)
            _shared_caches[(ttl, max_entries)] = cache
        return cache


def clear_local_caches() -> None:
    """Empty and forget every shared cache; later adapters start from a new one."""
    with _shared_lock:
        for cache in _shared_caches.values():
            cache.clear()
        _shared_caches.clear()


class LocalCacheStorage(BaseCacheStorage):
    """Stores each attribute as a separate entry in a local TTL cache.

    Args:
        ttl: Seconds an entry survives after it was last written. 0 keeps
            entries until they are evicted by size.
        cache_prefix: Prefix prepended to every key.
        max_entries: Size bound of the shared cache.
        cache: Optional mapping to use instead of the shared cache.
    """

    def __init__(
        self,
        ttl: int = DEFAULT_TTL_SECONDS,
        cache_prefix: str | None = None,
        max_entries: int = 10_000,
        cache: MutableMapping[str, str] | None = None,
    ) -> None:
        super().__init__(ttl, cache_prefix)
        self._cache: MutableMapping[str, str] | None = (
            cache if cache is not None else _shared_cache(ttl, max_entries)
        )

    def close(self) -> None:
        """Detach from the cache. Later calls raise ``StorageError``."""
        self._cache = None

    def _check_backend(self) -> None:
        self._mapping()

    def _mapping(self) -> MutableMapping[str, str]:
        cache = self._cache
        if cache is None:
            raise StorageError("Local cache storage has been closed")
        return cache

    def _load(self, key: str) -> str | None:
        cache = self._mapping()
        with _shared_lock:
            return cache.get(key)

    def _save(self, key: str, value: str, ttl: int) -> None:
        cache = self._mapping()
        with _shared_lock:
            cache[key] = value
