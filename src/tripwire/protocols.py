"""Capabilities exposed and consumed by the breaker."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ICircuitBreaker(Protocol):
    """Tracks availability of external services by name."""

    def is_available(self, service_name: str) -> bool:
        """Return True if the caller may try the service now."""
        ...

    def report_failure(self, service_name: str) -> None:
        """Record a failed call to the service."""
        ...

    def report_success(self, service_name: str) -> None:
        """Record a successful call to the service."""
        ...


@runtime_checkable
class ITripHandler(Protocol):
    """Callback notified when a service trips or is let through for a retry.

    Notifications are best effort: under concurrent access the same
    transition may be reported more than once, or not at all.
    """

    def __call__(self, service_name: str, count: int, message: str) -> None:
        ...
