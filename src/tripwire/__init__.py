"""tripwire: a storage-backed circuit breaker for named services.

Usage::

    from tripwire import CircuitBreaker, MemoryStatusStorage

    breaker = CircuitBreaker(MemoryStatusStorage())
    breaker.set_service_settings("billing-db", max_failures=5, retry_timeout=30)

    if breaker.is_available("billing-db"):
        ...
"""

from __future__ import annotations

from tripwire.breaker import CircuitBreaker, ServiceSettings
from tripwire.core.config import AppSettings, BreakerConfig, StorageConfig
from tripwire.exceptions import ConfigurationError, StorageError, TripwireError
from tripwire.factory import create_breaker, create_storage, local_breaker, memory_breaker, redis_breaker
from tripwire.handlers import CallbackTripHandler, LoggingTripHandler, NullTripHandler
from tripwire.protocols import ICircuitBreaker, ITripHandler
from tripwire.storage import (
    AggregatingStorage,
    IStatusStorage,
    LocalCacheStorage,
    MemoryStatusStorage,
    RedisStatusStorage,
)

__all__ = [
    "AggregatingStorage",
    "AppSettings",
    "BreakerConfig",
    "CallbackTripHandler",
    "CircuitBreaker",
    "ConfigurationError",
    "ICircuitBreaker",
    "IStatusStorage",
    "ITripHandler",
    "LocalCacheStorage",
    "LoggingTripHandler",
    "MemoryStatusStorage",
    "NullTripHandler",
    "RedisStatusStorage",
    "ServiceSettings",
    "StorageConfig",
    "StorageError",
    "TripwireError",
    "create_breaker",
    "create_storage",
    "local_breaker",
    "memory_breaker",
    "redis_breaker",
]
