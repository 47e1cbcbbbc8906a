"""Tests for create_storage / create_breaker and the one-line constructors."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from tripwire.breaker import CircuitBreaker, ServiceSettings
from tripwire.core.config import AppSettings, BreakerConfig, ServiceOverride, StorageConfig
from tripwire.factory import create_breaker, create_storage, local_breaker, memory_breaker, redis_breaker
from tripwire.storage.aggregate import AggregatingStorage
from tripwire.storage.local import LocalCacheStorage
from tripwire.storage.memory import MemoryStatusStorage
from tripwire.storage.redis import RedisStatusStorage


class TestCreateStorage:
    def test_default_is_memory(self) -> None:
        assert isinstance(create_storage(), MemoryStatusStorage)

    def test_local_backend(self) -> None:
        storage = create_storage(StorageConfig(backend="local", ttl=30, cache_prefix="x:"))
        assert isinstance(storage, LocalCacheStorage)
        assert storage.ttl == 30
        assert storage.cache_prefix == "x:"

    def test_redis_backend_is_lazy(self) -> None:
        storage = create_storage(StorageConfig(backend="redis", redis_url="redis://cache:6379/1"))
        assert isinstance(storage, RedisStatusStorage)

    def test_aggregate_wraps_backend(self) -> None:
        storage = create_storage(StorageConfig(backend="local", aggregate=True))
        assert isinstance(storage, AggregatingStorage)
        assert isinstance(storage.inner, LocalCacheStorage)

    def test_aggregate_max_age_from_settings(self) -> None:
        storage = create_storage(StorageConfig(aggregate=True, aggregate_max_age=5))
        assert isinstance(storage, AggregatingStorage)
        assert storage.max_age == 5

    def test_local_zero_ttl_keeps_values(self) -> None:
        storage = create_storage(StorageConfig(backend="local", ttl=0))
        storage.save_status("svc", "failures", "7", True)
        assert storage.load_status("svc", "failures") == "7"

    def test_accepts_app_settings(self) -> None:
        settings = AppSettings(storage=StorageConfig(backend="local"))
        assert isinstance(create_storage(settings), LocalCacheStorage)

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TRIPWIRE_STORAGE_BACKEND", "local")
        assert isinstance(create_storage(), LocalCacheStorage)

    def test_unknown_backend(self) -> None:
        config = StorageConfig.model_construct(backend="apc", aggregate=False)
        with pytest.raises(ValueError, match="apc"):
            create_storage(config)


class TestCreateBreaker:
    def test_defaults(self) -> None:
        breaker = create_breaker()
        assert isinstance(breaker, CircuitBreaker)
        assert isinstance(breaker.storage, MemoryStatusStorage)
        assert breaker.get_service_settings("anything") == ServiceSettings(20, 60)

    def test_applies_breaker_config(self) -> None:
        config = BreakerConfig(
            default_max_failures=3,
            default_retry_timeout=9,
            unavailable_message="gone",
            services={
                "dbKnown": ServiceOverride(max_failures=5, retry_timeout=5),
                "dbWrong": ServiceOverride(),
            },
        )
        breaker = create_breaker(config)

        assert breaker.unavailable_message == "gone"
        assert breaker.get_service_settings("dbKnown") == ServiceSettings(5, 5)
        assert breaker.get_service_settings("dbWrong") == ServiceSettings(3, 9)
        assert breaker.get_service_settings("dbNew") == ServiceSettings(3, 9)

    def test_app_settings_build_storage(self) -> None:
        settings = AppSettings(storage=StorageConfig(backend="local", aggregate=True))
        breaker = create_breaker(settings)
        assert isinstance(breaker.storage, AggregatingStorage)

    def test_explicit_storage_wins(self) -> None:
        storage = MemoryStatusStorage()
        breaker = create_breaker(AppSettings(storage=StorageConfig(backend="local")), storage=storage)
        assert breaker.storage is storage


class TestConstructors:
    def test_memory_breaker(self) -> None:
        breaker = memory_breaker(max_failures=2, retry_timeout=10)
        assert isinstance(breaker.storage, MemoryStatusStorage)
        assert breaker.get_service_settings("svc") == ServiceSettings(2, 10)

    def test_local_breakers_share_state(self) -> None:
        first = local_breaker(max_failures=2)
        second = local_breaker(max_failures=2)
        first.report_failure("svc")
        first.report_failure("svc")
        assert second.is_available("svc") is False

    def test_redis_breaker_is_aggregated(self) -> None:
        client = MagicMock()
        client.get.return_value = None
        breaker = redis_breaker(client, max_failures=1, ttl=90)

        assert isinstance(breaker.storage, AggregatingStorage)
        breaker.report_failure("svc")
        key, value = client.set.call_args.args
        assert key == "CircuitBreakerCircuitBreakerStatsAggregatedStats"
        assert '"failures":"1"' in value
        assert client.set.call_args.kwargs == {"ex": 90}

    def test_redis_breaker_max_age(self) -> None:
        assert redis_breaker(MagicMock()).storage.max_age == 1.0
        assert redis_breaker(MagicMock(), max_age=0).storage.max_age == 0
