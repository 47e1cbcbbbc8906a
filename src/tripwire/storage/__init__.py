"""Pluggable status storage backends and the aggregating decorator."""

from __future__ import annotations

from tripwire.storage.aggregate import AggregatingStorage
from tripwire.storage.base import BaseCacheStorage
from tripwire.storage.local import LocalCacheStorage, clear_local_caches
from tripwire.storage.memory import MemoryStatusStorage
from tripwire.storage.protocols import IStatusStorage
from tripwire.storage.redis import RedisStatusStorage

__all__ = [
    "AggregatingStorage",
    "BaseCacheStorage",
    "IStatusStorage",
    "LocalCacheStorage",
    "MemoryStatusStorage",
    "RedisStatusStorage",
    "clear_local_caches",
]
