"""Build breakers and storages from settings, plus one-line constructors."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tripwire.breaker import CircuitBreaker
from tripwire.storage.aggregate import AggregatingStorage
from tripwire.storage.local import LocalCacheStorage
from tripwire.storage.memory import MemoryStatusStorage

if TYPE_CHECKING:
    from tripwire.core.config import BreakerConfig, StorageConfig
    from tripwire.storage.protocols import IStatusStorage


def _resolve(settings: object | None, attr: str, marker: str) -> Any:
    """Accept an ``AppSettings``, the matching sub-config, or None."""
    if settings is None:
        return None
    config = getattr(settings, attr, None)
    if config is None and hasattr(settings, marker):
        config = settings
    return config


def create_storage(settings: object | None = None) -> IStatusStorage:
    """Create the status storage named by the settings.

    Args:
        settings: An ``AppSettings`` or ``StorageConfig`` instance.
            If None, reads ``StorageConfig`` from the environment.
    """
    config: StorageConfig | None = _resolve(settings, "storage", "backend")
    if config is None:
        from tripwire.core.config import StorageConfig

        config = StorageConfig()

    storage: IStatusStorage
    backend = config.backend
    if backend == "memory":
        storage = MemoryStatusStorage()
    elif backend == "local":
        storage = LocalCacheStorage(
            ttl=config.ttl,
            cache_prefix=config.cache_prefix,
            max_entries=config.local_max_entries,
        )
    elif backend == "redis":
        from tripwire.storage.redis import RedisStatusStorage

        storage = RedisStatusStorage(
            url=config.redis_url,
            ttl=config.ttl,
            cache_prefix=config.cache_prefix,
        )
    else:
        raise ValueError(f"Unknown status storage backend: {backend!r}")

    if config.aggregate:
        storage = AggregatingStorage(storage, max_age=config.aggregate_max_age)
    return storage


def create_breaker(
    settings: object | None = None,
    storage: IStatusStorage | None = None,
) -> CircuitBreaker:
    """Create a breaker configured from settings.

    Args:
        settings: An ``AppSettings`` or ``BreakerConfig`` instance. If None,
            both breaker and storage settings come from the environment.
        storage: Storage to use instead of one built by ``create_storage``.
    """
    config: BreakerConfig | None = _resolve(settings, "breaker", "default_max_failures")
    if config is None:
        from tripwire.core.config import BreakerConfig

        config = BreakerConfig()

    if storage is None:
        storage = create_storage(settings if hasattr(settings, "storage") else None)

    breaker = CircuitBreaker(
        storage,
        max_failures=config.default_max_failures,
        retry_timeout=config.default_retry_timeout,
        unavailable_message=config.unavailable_message,
        retry_message=config.retry_message,
    )
    for service_name, override in config.services.items():
        breaker.set_service_settings(service_name, override.max_failures, override.retry_timeout)
    return breaker


def memory_breaker(max_failures: int = 20, retry_timeout: int = 60) -> CircuitBreaker:
    """Breaker whose state lives and dies with the returned instance."""
    return CircuitBreaker(MemoryStatusStorage(), max_failures, retry_timeout)


def local_breaker(
    max_failures: int = 20,
    retry_timeout: int = 60,
    ttl: int = 3600,
    cache_prefix: str | None = None,
) -> CircuitBreaker:
    """Breaker sharing state with every other local breaker in the process."""
    return CircuitBreaker(LocalCacheStorage(ttl=ttl, cache_prefix=cache_prefix), max_failures, retry_timeout)


def redis_breaker(
    client: Any,
    max_failures: int = 20,
    retry_timeout: int = 60,
    ttl: int = 3600,
    cache_prefix: str | None = None,
    max_age: float = 1.0,
) -> CircuitBreaker:
    """Breaker over an existing Redis client, one round-trip per read batch.

    Reads are served from a copy of the shared document that is reloaded
    after every flush and at least every ``max_age`` seconds.
    """
    from tripwire.storage.redis import RedisStatusStorage

    storage = AggregatingStorage(
        RedisStatusStorage(client=client, ttl=ttl, cache_prefix=cache_prefix),
        max_age=max_age,
    )
    return CircuitBreaker(storage, max_failures, retry_timeout)
