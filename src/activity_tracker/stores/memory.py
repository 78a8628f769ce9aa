"""Almacén en memoria, útil para pruebas y uso embebido."""

from __future__ import annotations

from activity_tracker.stores.base import LogStore


class MemoryLogStore(LogStore):
    """In-process byte buffer implementing the log store contract."""

    def __init__(self, initial: bytes = b"") -> None:
        self._data = bytearray(initial)

    def read_all(self) -> bytes:
        return bytes(self._data)

    def append(self, data: bytes) -> None:
        self._data.extend(data)
