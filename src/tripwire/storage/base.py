"""Shared behaviour for cache-backed storage adapters."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from tripwire.exceptions import StorageError

log = logging.getLogger(__name__)

DEFAULT_CACHE_PREFIX = "CircuitBreaker"
DEFAULT_TTL_SECONDS = 3600


class BaseCacheStorage(ABC):
    """Template for adapters that keep one cache entry per attribute.

    Keys are ``cache_prefix + service_name + attribute_name``. Subclasses
    provide ``_check_backend``, ``_load`` and ``_save``; any exception
    raised by ``_load``/``_save`` is wrapped in ``StorageError``.
    """

    def __init__(self, ttl: int = DEFAULT_TTL_SECONDS, cache_prefix: str | None = None) -> None:
        self._ttl = ttl
        self._cache_prefix = cache_prefix if cache_prefix is not None else DEFAULT_CACHE_PREFIX

    @property
    def ttl(self) -> int:
        return self._ttl

    @property
    def cache_prefix(self) -> str:
        return self._cache_prefix

    def _key(self, service_name: str, attribute_name: str) -> str:
        return f"{self._cache_prefix}{service_name}{attribute_name}"

    def load_status(self, service_name: str, attribute_name: str) -> str:
        self._check_backend()
        key = self._key(service_name, attribute_name)
        try:
            value = self._load(key)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to load key: {key}") from e
        return value or ""

    def save_status(
        self,
        service_name: str,
        attribute_name: str,
        value: str,
        flush: bool = False,
    ) -> None:
        self._check_backend()
        key = self._key(service_name, attribute_name)
        try:
            self._save(key, value, self._ttl)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save key: {key}") from e
        log.debug("Saved %s (ttl=%ds)", key, self._ttl)

    @abstractmethod
    def _check_backend(self) -> None:
        """Raise ``StorageError`` if the backing client is not usable."""

    @abstractmethod
    def _load(self, key: str) -> str | None:
        """Return the raw value for ``key`` or None on a miss."""

    @abstractmethod
    def _save(self, key: str, value: str, ttl: int) -> None:
        """Write ``value`` under ``key`` expiring after ``ttl`` seconds."""
