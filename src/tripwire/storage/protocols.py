"""Status storage protocol — the contract every backend implements."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class IStatusStorage(Protocol):
    """Protocol for breaker status storage backends (memory, local cache, redis, etc.).

    Values are keyed by ``(service_name, attribute_name)`` and always stored as
    strings. Backends raise ``StorageError`` when the medium can not be used;
    callers should then switch to another instance instead of retrying.
    """

    def load_status(self, service_name: str, attribute_name: str) -> str:
        """Load a stored value. Returns ``""`` when absent or stored empty."""
        ...

    def save_status(
        self,
        service_name: str,
        attribute_name: str,
        value: str,
        flush: bool = False,
    ) -> None:
        """Store a value.

        Args:
            service_name: Service the value belongs to.
            attribute_name: Attribute within the service (``failures``, ``lastTest``).
            value: String value to store.
            flush: When True the value must be visible to other storage
                instances once this returns. When False the backend may
                buffer it, or never persist it at all.
        """
        ...
