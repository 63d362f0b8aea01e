"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
import time
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest
from filequarantine.core.config import QuarantineConfig
from filequarantine.core.sizes import MB
from filequarantine.quarantine.models import FileRecord
from filequarantine.quarantine.storage import LocalFileStore

# Fixed reference time for classifier tests
NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)

FileFactory = Callable[..., Path]


@pytest.fixture
def now() -> datetime:
    """Fixed reference time."""
    return NOW


@pytest.fixture
def make_file() -> FileFactory:
    """Create a file with a given size and age (mtime in the past).

    Usage: make_file(path, size=200, age=timedelta(hours=2))
    """

    def _make(path: Path, size: int = 0, age: timedelta = timedelta(0)) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            if size:
                f.truncate(size)
        mtime = time.time() - age.total_seconds()
        os.utime(path, (mtime, mtime))
        return path

    return _make


@pytest.fixture
def scan_root(tmp_path: Path) -> Path:
    """Empty directory used as the only scan root."""
    root = tmp_path / "srv"
    root.mkdir()
    return root


@pytest.fixture
def quarantine_root(tmp_path: Path) -> Path:
    """Quarantine root next to (not inside) the scan root."""
    return tmp_path / "quarantine"


@pytest.fixture
def make_config(scan_root: Path, quarantine_root: Path) -> Callable[..., QuarantineConfig]:
    """Build a QuarantineConfig rooted in tmp_path.

    Exclude patterns default to empty because tmp_path usually lives
    under /tmp, which the default patterns exclude.
    """

    def _make(**overrides: Any) -> QuarantineConfig:
        values: dict[str, Any] = {
            "scan_roots": (scan_root,),
            "quarantine_root": quarantine_root,
            "extensions": {"sql", "bak", "log", "tmp", "old"},
            "retention_days": 30,
            "min_file_age_minutes": 60,
            "exclude_patterns": (),
            "truncate_logs": False,
            "truncate_size": 5 * MB,
        }
        values.update(overrides)
        return QuarantineConfig(**values)

    return _make


@pytest.fixture
def make_record() -> Callable[..., FileRecord]:
    """Build a FileRecord aged relative to the fixed reference time."""

    def _make(path: str, size: int = 100, age: timedelta = timedelta(hours=2)) -> FileRecord:
        return FileRecord(path=path, size_bytes=size, modified_at=NOW - age)

    return _make


class RecordingStore(LocalFileStore):
    """LocalFileStore that records every mutating call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[str, ...]]] = []

    def truncate(self, path: str, size_bytes: int) -> None:
        self.calls.append(("truncate", (path,)))
        super().truncate(path, size_bytes)

    def move(self, source: str, destination: str) -> None:
        self.calls.append(("move", (source, destination)))
        super().move(source, destination)

    def delete(self, path: str) -> None:
        self.calls.append(("delete", (path,)))
        super().delete(path)

    def mkdir_all(self, path: str) -> None:
        self.calls.append(("mkdir_all", (path,)))
        super().mkdir_all(path)

    def set_read_only(self, path: str) -> None:
        self.calls.append(("set_read_only", (path,)))
        super().set_read_only(path)

    def remove_empty_dirs(self, root: str) -> int:
        self.calls.append(("remove_empty_dirs", (root,)))
        return super().remove_empty_dirs(root)

    def names(self) -> list[str]:
        """Names of the recorded calls, in order."""
        return [name for name, _args in self.calls]


@pytest.fixture
def recording_store() -> RecordingStore:
    """Local store that records every mutating call it receives."""
    return RecordingStore()
