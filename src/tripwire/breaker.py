"""Storage-backed circuit breaker: tracks availability of services by name.

Failure counts and the time of the last state change live in an
``IStatusStorage``, so any number of threads, processes or hosts sharing
the storage see the same picture. There is no locking: the increment and
decrement rules are meant to correct themselves over many calls, and a
short race around retry admission is accepted.
"""

from __future__ import annotations

import dataclasses
import logging
import time
from typing import TYPE_CHECKING, Callable, TypeVar

from tripwire.exceptions import ConfigurationError
from tripwire.protocols import ITripHandler

if TYPE_CHECKING:
    from tripwire.storage.protocols import IStatusStorage

log = logging.getLogger(__name__)

T = TypeVar("T")

FAILURES = "failures"
LAST_TEST = "lastTest"


@dataclasses.dataclass(frozen=True)
class ServiceSettings:
    """Threshold and retry timeout for one service."""

    max_failures: int
    retry_timeout: int


def _to_int(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return 0


class CircuitBreaker:
    """Decides whether a service should be called, based on recent failures.

    A service is available while its failure count is below ``max_failures``.
    Once it reaches the threshold, calls are refused until ``retry_timeout``
    seconds have passed since the last recorded change; then a single
    caller is let through to probe the service.

    Example::

        breaker = CircuitBreaker(MemoryStatusStorage())
        if breaker.is_available("billing-db"):
            try:
                query()
                breaker.report_success("billing-db")
            except DatabaseError:
                breaker.report_failure("billing-db")

    Args:
        storage: Where failure counts and timestamps are kept.
        max_failures: Default threshold for services without own settings.
        retry_timeout: Default seconds to wait before letting a probe through.
        unavailable_message: Passed to trip handlers when a service trips.
        retry_message: Passed to trip handlers when a probe is let through.
    """

    def __init__(
        self,
        storage: IStatusStorage,
        max_failures: int = 20,
        retry_timeout: int = 60,
        unavailable_message: str = "Service No Longer Available",
        retry_message: str = "Retrying Service",
    ) -> None:
        self._storage = storage
        self._default_max_failures = max_failures
        self._default_retry_timeout = retry_timeout
        self._unavailable_message = unavailable_message
        self._retry_message = retry_message
        self._settings: dict[str, ServiceSettings] = {}
        self._handlers: dict[str, ITripHandler] = {}

    @property
    def storage(self) -> IStatusStorage:
        return self._storage

    @property
    def unavailable_message(self) -> str:
        return self._unavailable_message

    @unavailable_message.setter
    def unavailable_message(self, message: str) -> None:
        self._unavailable_message = message

    @property
    def retry_message(self) -> str:
        return self._retry_message

    @retry_message.setter
    def retry_message(self, message: str) -> None:
        self._retry_message = message

    # ── Configuration ────────────────────────────────────────────────

    def set_service_settings(
        self,
        service_name: str,
        max_failures: int,
        retry_timeout: int,
    ) -> CircuitBreaker:
        """Override threshold and retry timeout for one service.

        A zero for either value falls back to the breaker default, so a
        service can not be configured with a real threshold or timeout of 0.
        """
        self._settings[service_name] = ServiceSettings(
            max_failures=max_failures or self._default_max_failures,
            retry_timeout=retry_timeout or self._default_retry_timeout,
        )
        return self

    def get_service_settings(self, service_name: str) -> ServiceSettings:
        """Return settings for a service, storing the defaults on first lookup."""
        settings = self._settings.get(service_name)
        if settings is None:
            settings = ServiceSettings(
                max_failures=self._default_max_failures,
                retry_timeout=self._default_retry_timeout,
            )
            self._settings[service_name] = settings
        return settings

    def register_handler(self, service_name: str, handler: ITripHandler) -> None:
        """Set the trip handler for a service, replacing any previous one."""
        self._handlers[service_name] = handler

    def unregister_handler(self, service_name: str) -> None:
        self._handlers.pop(service_name, None)

    def _get_handler(self, service_name: str) -> ITripHandler:
        handler = self._handlers.get(service_name)
        if not isinstance(handler, ITripHandler):
            raise ConfigurationError(f"Handler for service {service_name} has not been configured")
        return handler

    # ── Stored state ─────────────────────────────────────────────────

    def _get_failures(self, service_name: str) -> int:
        return _to_int(self._storage.load_status(service_name, FAILURES))

    def _get_last_test(self, service_name: str) -> int:
        return _to_int(self._storage.load_status(service_name, LAST_TEST))

    def _set_failures(self, service_name: str, failures: int) -> None:
        self._storage.save_status(service_name, FAILURES, str(failures), False)
        # the timestamp write is the one that must reach the backend
        self._storage.save_status(service_name, LAST_TEST, str(int(time.time())), True)

    # ── Breaker operations ───────────────────────────────────────────

    def is_available(self, service_name: str) -> bool:
        """Return True if the caller may use the service now.

        Raises:
            ConfigurationError: The handler registered for a service that just
                reached its threshold is not callable.
            StorageError: The storage backend failed.
        """
        failures = self._get_failures(service_name)
        settings = self.get_service_settings(service_name)
        if failures < settings.max_failures:
            return True

        # Several callers can see the same count here, so handlers may fire more than once.
        if failures == settings.max_failures and service_name in self._handlers:
            handler = self._get_handler(service_name)
            log.info("Service %s tripped after %d failures", service_name, failures)
            handler(service_name, failures, self._unavailable_message)

        last_test = self._get_last_test(service_name)
        if last_test + settings.retry_timeout < int(time.time()):
            # Refresh the timestamp before the probe so other callers keep
            # getting False; those racing us to this line still get through.
            self._set_failures(service_name, failures)
            log.debug("Letting a probe through to %s (%d failures)", service_name, failures)

            if service_name in self._handlers:
                self._get_handler(service_name)(service_name, failures, self._retry_message)
            return True

        return False

    def report_failure(self, service_name: str) -> None:
        """Count one more failure. The count has no upper bound."""
        self._set_failures(service_name, self._get_failures(service_name) + 1)

    def report_success(self, service_name: str) -> None:
        """Walk the failure count back after a successful call.

        Over the threshold the count drops to ``max_failures - 1``; below it,
        by one. A service with no failures is left untouched.
        """
        failures = self._get_failures(service_name)
        max_failures = self.get_service_settings(service_name).max_failures
        if failures > max_failures:
            self._set_failures(service_name, max_failures - 1)
        elif failures > 0:
            self._set_failures(service_name, failures - 1)

    def attempt(
        self,
        service_name: str,
        code: Callable[[], T],
        failed: Callable[[], T],
    ) -> T:
        """Run ``code`` if the service is available, reporting the outcome.

        Returns the result of ``code``, or of ``failed`` when the service is
        unavailable or ``code`` raised an ``Exception``.
        """
        if not self.is_available(service_name):
            return failed()
        try:
            result = code()
        except Exception:
            log.debug("Call to %s failed", service_name, exc_info=True)
            self.report_failure(service_name)
            return failed()
        self.report_success(service_name)
        return result
