"""Clases base para almacenes de registros de actividad."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

LOG_FILE_NAME = "activity-tracker-data.csv"


@dataclass(frozen=True)
class LogPaths:
    """Location of one user's activity log under a data directory."""

    root: Path
    username: str

    @property
    def log_file(self) -> Path:
        return self.root / self.username / LOG_FILE_NAME


class LogStore(ABC):
    """Append-only byte store holding a user's encoded activity log."""

    @abstractmethod
    def read_all(self) -> bytes:
        """Return the whole stored content (empty if nothing exists yet)."""

    @abstractmethod
    def append(self, data: bytes) -> None:
        """Add ``data`` after the existing content, creating the store if absent.

        Raises:
            OSError: If the underlying storage cannot be written.
        """
