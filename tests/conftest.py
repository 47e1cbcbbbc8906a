"""Shared fixtures for tripwire tests."""

from __future__ import annotations

import time
from collections.abc import Iterator

import pytest

from tripwire.breaker import CircuitBreaker
from tripwire.storage.local import clear_local_caches
from tripwire.storage.memory import MemoryStatusStorage
from tests.fakes.fake_clock import FrozenClock

SERVICE_CONF = {
    "dbKnown": {"max_failures": 5, "retry_timeout": 5},
    "dbWrong": {"max_failures": 0, "retry_timeout": 0},
}


@pytest.fixture(autouse=True)
def _fresh_local_caches() -> Iterator[None]:
    """Local caches are process-wide; isolate every test."""
    clear_local_caches()
    yield
    clear_local_caches()


@pytest.fixture
def storage() -> MemoryStatusStorage:
    return MemoryStatusStorage()


@pytest.fixture
def breaker(storage: MemoryStatusStorage) -> CircuitBreaker:
    """Breaker with default 20/60 and the ``dbKnown``/``dbWrong`` services configured."""
    cb = CircuitBreaker(storage)
    for service_name, conf in SERVICE_CONF.items():
        cb.set_service_settings(service_name, conf["max_failures"], conf["retry_timeout"])
    return cb


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch) -> FrozenClock:
    frozen = FrozenClock(float(int(time.time())))
    monkeypatch.setattr(time, "time", frozen)
    return frozen
