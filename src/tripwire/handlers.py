"""Ready-made trip handlers."""

from __future__ import annotations

import logging
from typing import Callable


class NullTripHandler:
    """Ignores every notification."""

    def __call__(self, service_name: str, count: int, message: str) -> None:
        return None


class LoggingTripHandler:
    """Writes one log record per notification.

    The record carries ``service``, ``failures`` and ``trip_message`` extras
    so structured renderers can index them.
    """

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.WARNING) -> None:
        self._log = logger or logging.getLogger(__name__)
        self._level = level

    def __call__(self, service_name: str, count: int, message: str) -> None:
        self._log.log(
            self._level,
            "%s: %s (%d failures)",
            service_name,
            message,
            count,
            extra={"service": service_name, "failures": count, "trip_message": message},
        )


class CallbackTripHandler:
    """Adapts a plain function, e.g. one that pages on-call or bumps a metric."""

    def __init__(self, callback: Callable[[str, int, str], object]) -> None:
        self._callback = callback

    def __call__(self, service_name: str, count: int, message: str) -> None:
        self._callback(service_name, count, message)
