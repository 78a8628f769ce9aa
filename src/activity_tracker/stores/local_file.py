"""Almacén de registros en archivo local (un CSV por usuario)."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from activity_tracker.stores.base import LogPaths, LogStore

logger = logging.getLogger(__name__)

_LOCKS: dict[Path, threading.Lock] = {}
_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    with _LOCKS_GUARD:
        return _LOCKS.setdefault(path, threading.Lock())


class FileLogStore(LogStore):
    """Local file log store; appends to the same path are serialized."""

    def __init__(self, paths: LogPaths) -> None:
        """Create a file store.

        Args:
            paths: Data directory and username locating the CSV file.
        """
        self._paths = paths
        self._path = paths.log_file.expanduser().resolve()

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def read_all(self) -> bytes:
        if not self._path.exists():
            logger.debug("Log file %s does not exist yet", self._path)
            return b""
        logger.debug("Reading log file %s", self._path)
        return self._path.read_bytes()

    def append(self, data: bytes) -> None:
        with _lock_for(self._path):
            if not self._path.exists():
                logger.info("Creating log file %s", self._path)
                self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("ab") as fh:
                fh.write(data)
