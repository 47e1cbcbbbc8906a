"""Redis-backed status storage.

Requires optional dependency: ``pip install tripwire[redis]``
"""

from __future__ import annotations

import logging
from typing import Any

from tripwire.exceptions import StorageError
from tripwire.storage.base import DEFAULT_TTL_SECONDS, BaseCacheStorage

log = logging.getLogger(__name__)


class RedisStatusStorage(BaseCacheStorage):
    """Stores each attribute as its own Redis key with a native expiry.

    Pass an existing synchronous ``redis.Redis`` client, or a URL from which
    one is created on first use. Wrap in ``AggregatingStorage`` to cut the
    number of round-trips per request.
    """

    def __init__(
        self,
        client: Any | None = None,
        url: str = "",
        ttl: int = DEFAULT_TTL_SECONDS,
        cache_prefix: str | None = None,
    ) -> None:
        super().__init__(ttl, cache_prefix)
        self._url = url or "redis://localhost:6379/0"
        self._client: Any | None = client

    def _get_client(self) -> Any:
        """Lazy-initialize the Redis client."""
        if self._client is not None:
            return self._client
        try:
            import redis  # type: ignore[import-untyped]
        except ImportError:
            raise StorageError(
                "Redis is required for the Redis status storage. "
                "Install it with: pip install tripwire[redis]"
            ) from None

        try:
            self._client = redis.Redis.from_url(self._url, decode_responses=True)
        except Exception as e:
            raise StorageError(f"Invalid Redis URL: {self._url!r}") from e
        log.debug("Connected Redis status storage to %s", self._url)
        return self._client

    def _check_backend(self) -> None:
        self._get_client()

    def _load(self, key: str) -> str | None:
        raw = self._get_client().get(key)
        if isinstance(raw, bytes):
            return raw.decode("utf-8")
        return raw

    def _save(self, key: str, value: str, ttl: int) -> None:
        if ttl > 0:
            self._get_client().set(key, value, ex=ttl)
        else:
            self._get_client().set(key, value)
