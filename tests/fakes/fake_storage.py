"""Status storage fakes for testing."""

from __future__ import annotations


class SpyStorage:
    """Dict-backed IStatusStorage that records every write, flushed or not."""

    def __init__(self) -> None:
        self._data: dict[tuple[str, str], str] = {}
        self.writes: list[tuple[str, str, str, bool]] = []
        self.reads: list[tuple[str, str]] = []

    def load_status(self, service_name: str, attribute_name: str) -> str:
        self.reads.append((service_name, attribute_name))
        return self._data.get((service_name, attribute_name), "")

    def save_status(
        self,
        service_name: str,
        attribute_name: str,
        value: str,
        flush: bool = False,
    ) -> None:
        self.writes.append((service_name, attribute_name, value, flush))
        self._data[(service_name, attribute_name)] = value


class BrokenStorage:
    """Storage whose medium is gone; every call raises StorageError."""

    def load_status(self, service_name: str, attribute_name: str) -> str:
        from tripwire.exceptions import StorageError

        raise StorageError("backend unreachable")

    def save_status(
        self,
        service_name: str,
        attribute_name: str,
        value: str,
        flush: bool = False,
    ) -> None:
        from tripwire.exceptions import StorageError

        raise StorageError("backend unreachable")
