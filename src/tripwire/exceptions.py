"""Exception hierarchy for tripwire."""


class TripwireError(Exception):
    """Base exception for all tripwire errors."""


class StorageError(TripwireError):
    """Raised when a status storage backend can not be used any more.

    The medium is unreachable, misconfigured or its client library is
    missing. The storage instance that raised must not be reused.
    """


class ConfigurationError(TripwireError, ValueError):
    """Raised when a registered trip handler is not a usable callback."""
