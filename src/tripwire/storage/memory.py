"""In-memory status storage — dict-backed, ideal for tests."""

from __future__ import annotations


class MemoryStatusStorage:
    """Keeps statuses in a plain nested dict; everything is lost with the instance."""

    def __init__(self) -> None:
        self._data: dict[str, dict[str, str]] = {}

    def load_status(self, service_name: str, attribute_name: str) -> str:
        return self._data.get(service_name, {}).get(attribute_name, "")

    def save_status(
        self,
        service_name: str,
        attribute_name: str,
        value: str,
        flush: bool = False,
    ) -> None:
        self._data.setdefault(service_name, {})[attribute_name] = value
