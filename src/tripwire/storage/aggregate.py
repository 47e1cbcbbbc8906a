"""Decorator that batches every service's statuses into a single cache entry."""

from __future__ import annotations

import json
import logging
import time
from typing import TYPE_CHECKING

from tripwire.exceptions import StorageError

if TYPE_CHECKING:
    from tripwire.storage.protocols import IStatusStorage

log = logging.getLogger(__name__)

AGGREGATE_SERVICE = "CircuitBreakerStats"
AGGREGATE_ATTRIBUTE = "AggregatedStats"


class AggregatingStorage:
    """Wraps an ``IStatusStorage`` so all statuses live in one JSON document.

    The document is read once and held until the next flush. A flushed save
    re-reads the document, merges the writes made since the previous flush
    over it and writes it back, which narrows (but does not close) the
    window in which a concurrent writer's update can be lost. The held copy
    is discarded after every flush so later reads see fresh data.

    A process that only reads never flushes, so it would keep seeing the
    document as it was on first access. Call ``refresh()`` at the start of
    each unit of work (request, job, batch), or pass ``max_age`` to reload
    the held copy once it is older than that many seconds.

    Args:
        inner: Storage holding the JSON document.
        max_age: Seconds a held copy is trusted. 0 holds it until a flush
            or ``refresh()``.
    """

    def __init__(self, inner: IStatusStorage, max_age: float = 0) -> None:
        self._inner = inner
        self._max_age = max_age
        self._stats: dict[str, dict[str, str]] | None = None
        self._loaded_at = 0.0
        self._pending: dict[str, dict[str, str]] = {}

    @property
    def inner(self) -> IStatusStorage:
        return self._inner

    @property
    def max_age(self) -> float:
        return self._max_age

    def refresh(self) -> None:
        """Drop the held copy so the next access reads the inner storage.

        Unflushed writes are kept and applied over the reloaded document.
        """
        self._stats = None

    def load_status(self, service_name: str, attribute_name: str) -> str:
        return self._held().get(service_name, {}).get(attribute_name, "")

    def save_status(
        self,
        service_name: str,
        attribute_name: str,
        value: str,
        flush: bool = False,
    ) -> None:
        self._held().setdefault(service_name, {})[attribute_name] = value
        self._pending.setdefault(service_name, {})[attribute_name] = value

        if flush:
            self._flush()

    def _held(self) -> dict[str, dict[str, str]]:
        if self._stats is not None and self._max_age > 0:
            if time.monotonic() - self._loaded_at > self._max_age:
                self._stats = None

        if self._stats is None:
            stats = self._load_stats()
            for service_name, attributes in self._pending.items():
                stats.setdefault(service_name, {}).update(attributes)
            self._stats = stats
            self._loaded_at = time.monotonic()
        return self._stats

    def _flush(self) -> None:
        merged = self._load_stats()
        for service_name, attributes in self._pending.items():
            merged.setdefault(service_name, {}).update(attributes)

        self._inner.save_status(
            AGGREGATE_SERVICE,
            AGGREGATE_ATTRIBUTE,
            json.dumps(merged, separators=(",", ":"), sort_keys=True),
            True,
        )
        log.debug("Flushed aggregated stats for %d service(s)", len(merged))

        # Other processes may write before our next access.
        self._stats = None
        self._pending = {}

    def _load_stats(self) -> dict[str, dict[str, str]]:
        raw = self._inner.load_status(AGGREGATE_SERVICE, AGGREGATE_ATTRIBUTE)
        if not raw:
            return {}
        try:
            stats = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError("Aggregated stats entry is not valid JSON") from e
        if not isinstance(stats, dict):
            return {}
        return {
            str(service): {str(k): str(v) for k, v in attributes.items()}
            for service, attributes in stats.items()
            if isinstance(attributes, dict)
        }
