"""Tests for the append-only log stores."""

from __future__ import annotations

import threading
from pathlib import Path

from activity_tracker.stores.base import LOG_FILE_NAME, LogPaths
from activity_tracker.stores.local_file import FileLogStore
from activity_tracker.stores.memory import MemoryLogStore


def test_file_store_missing_reads_empty(tmp_path: Path) -> None:
    store = FileLogStore(LogPaths(root=tmp_path, username="ana"))
    assert store.read_all() == b""
    assert not store.exists()


def test_file_store_append_creates_and_preserves(tmp_path: Path) -> None:
    store = FileLogStore(LogPaths(root=tmp_path / "data", username="ana"))
    store.append(b"first\n")
    store.append(b"second\n")
    assert store.path == (tmp_path / "data" / "ana" / LOG_FILE_NAME).resolve()
    assert store.read_all() == b"first\nsecond\n"


def test_file_store_empty_append_creates_without_erasing(tmp_path: Path) -> None:
    paths = LogPaths(root=tmp_path, username="ana")
    FileLogStore(paths).append(b"")
    assert paths.log_file.exists()
    FileLogStore(paths).append(b"row\n")
    FileLogStore(paths).append(b"")
    assert paths.log_file.read_bytes() == b"row\n"


def test_file_store_concurrent_appends_do_not_interleave(tmp_path: Path) -> None:
    paths = LogPaths(root=tmp_path, username="ana")
    rows = [f"row-{i:03d}\n".encode() for i in range(50)]

    threads = [
        threading.Thread(target=FileLogStore(paths).append, args=(row,))
        for row in rows
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    lines = FileLogStore(paths).read_all().splitlines(keepends=True)
    assert sorted(lines) == sorted(rows)


def test_memory_store() -> None:
    store = MemoryLogStore(b"a")
    store.append(b"b")
    assert store.read_all() == b"ab"
    assert MemoryLogStore().read_all() == b""
