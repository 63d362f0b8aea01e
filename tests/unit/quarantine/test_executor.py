"""Unit tests for ActionExecutor.

Tests live and dry-run execution of truncate, quarantine and delete,
and conversion of OS errors into failed outcomes.
"""

import stat
from collections.abc import Callable
from datetime import timedelta
from pathlib import Path
from typing import Any
from unittest.mock import patch

from filequarantine.quarantine.executor import ActionExecutor
from filequarantine.quarantine.models import ActionType, ErrorKind, FileRecord
from filequarantine.quarantine.storage import READ_ONLY_MODE, LocalFileStore

FileFactory = Callable[..., Path]


def _record_for(path: Path) -> FileRecord:
    """Snapshot an existing file as a FileRecord."""
    (record,) = (r for r in LocalFileStore().list_files(str(path.parent)) if r.path == str(path))
    return record


class TestExecuteTruncate:
    """Tests for ActionExecutor.execute_truncate."""

    def test_truncates_to_threshold(self, tmp_path: Path, make_file: FileFactory) -> None:
        """The file is cut to the threshold and the freed bytes reported."""
        path = make_file(tmp_path / "big.log", size=2048)

        outcome = ActionExecutor(LocalFileStore()).execute_truncate(_record_for(path), 1024)

        assert outcome.succeeded
        assert outcome.action == ActionType.TRUNCATE
        assert outcome.size_before == 2048
        assert outcome.size_after == 1024
        assert outcome.bytes_affected == 1024
        assert path.stat().st_size == 1024

    def test_dry_run_leaves_file(
        self, tmp_path: Path, make_file: FileFactory, recording_store: Any
    ) -> None:
        """Dry-run reports the same outcome without touching the file."""
        path = make_file(tmp_path / "big.log", size=2048)

        outcome = ActionExecutor(recording_store, dry_run=True).execute_truncate(
            _record_for(path), 1024
        )

        assert outcome.succeeded
        assert outcome.dry_run
        assert outcome.size_after == 1024
        assert path.stat().st_size == 2048
        assert recording_store.calls == []

    def test_failure_becomes_outcome(self, tmp_path: Path, make_file: FileFactory) -> None:
        """OS errors are returned as failed outcomes."""
        path = make_file(tmp_path / "big.log", size=2048)
        record = _record_for(path)
        path.unlink()

        outcome = ActionExecutor(LocalFileStore()).execute_truncate(record, 1024)

        assert outcome.failed
        assert outcome.error_kind == ErrorKind.PATH_NOT_FOUND
        assert outcome.error


class TestExecuteQuarantine:
    """Tests for ActionExecutor.execute_quarantine."""

    def test_moves_and_protects(self, tmp_path: Path, make_file: FileFactory) -> None:
        """The file lands at the destination with mode 0440."""
        source = make_file(tmp_path / "srv" / "a.sql", size=200)
        destination = tmp_path / "q" / "srv" / "a.sql"

        outcome = ActionExecutor(LocalFileStore()).execute_quarantine(
            _record_for(source), str(destination)
        )

        assert outcome.succeeded
        assert outcome.destination == str(destination)
        assert not source.exists()
        assert destination.stat().st_size == 200
        assert stat.S_IMODE(destination.stat().st_mode) == READ_ONLY_MODE

    def test_preserves_mtime(self, tmp_path: Path, make_file: FileFactory) -> None:
        """The move keeps the original modification time."""
        source = make_file(tmp_path / "srv" / "a.sql", age=timedelta(days=10))
        mtime = source.stat().st_mtime
        destination = tmp_path / "q" / "a.sql"

        ActionExecutor(LocalFileStore()).execute_quarantine(_record_for(source), str(destination))

        assert destination.stat().st_mtime == mtime

    def test_overwrites_previous_copy(self, tmp_path: Path, make_file: FileFactory) -> None:
        """A file quarantined again replaces the older copy."""
        source = make_file(tmp_path / "srv" / "a.sql", size=10)
        destination = make_file(tmp_path / "q" / "a.sql", size=99)

        outcome = ActionExecutor(LocalFileStore()).execute_quarantine(
            _record_for(source), str(destination)
        )

        assert outcome.succeeded
        assert destination.stat().st_size == 10

    def test_dry_run_makes_no_calls(
        self, tmp_path: Path, make_file: FileFactory, recording_store: Any
    ) -> None:
        """Dry-run neither creates directories nor moves the file."""
        source = make_file(tmp_path / "srv" / "a.sql", size=200)
        destination = tmp_path / "q" / "srv" / "a.sql"

        outcome = ActionExecutor(recording_store, dry_run=True).execute_quarantine(
            _record_for(source), str(destination)
        )

        assert outcome.succeeded
        assert outcome.dry_run
        assert outcome.destination == str(destination)
        assert source.exists()
        assert not (tmp_path / "q").exists()
        assert recording_store.calls == []

    def test_move_failure(self, tmp_path: Path, make_file: FileFactory) -> None:
        """A failed move leaves the source and reports IO_FAILURE."""
        source = make_file(tmp_path / "srv" / "a.sql")
        destination = tmp_path / "q" / "a.sql"

        with patch.object(LocalFileStore, "move", side_effect=PermissionError("denied")):
            outcome = ActionExecutor(LocalFileStore()).execute_quarantine(
                _record_for(source), str(destination)
            )

        assert outcome.failed
        assert outcome.error_kind == ErrorKind.IO_FAILURE
        assert source.exists()

    def test_chmod_failure_still_succeeds(self, tmp_path: Path, make_file: FileFactory) -> None:
        """A permission change failure after the move is only a warning."""
        source = make_file(tmp_path / "srv" / "a.sql")
        destination = tmp_path / "q" / "a.sql"

        with patch.object(LocalFileStore, "set_read_only", side_effect=OSError("read-only fs")):
            outcome = ActionExecutor(LocalFileStore()).execute_quarantine(
                _record_for(source), str(destination)
            )

        assert outcome.succeeded
        assert destination.exists()

    def test_mkdir_failure(self, tmp_path: Path, make_file: FileFactory) -> None:
        """A destination directory that cannot be created fails the action."""
        source = make_file(tmp_path / "srv" / "a.sql")

        with patch.object(LocalFileStore, "mkdir_all", side_effect=PermissionError("denied")):
            outcome = ActionExecutor(LocalFileStore()).execute_quarantine(
                _record_for(source), str(tmp_path / "q" / "a.sql")
            )

        assert outcome.failed
        assert source.exists()


class TestExecuteDelete:
    """Tests for ActionExecutor.execute_delete."""

    def test_deletes_file(self, tmp_path: Path, make_file: FileFactory) -> None:
        """The expired file is removed."""
        path = make_file(tmp_path / "q" / "old.bak", size=50)

        outcome = ActionExecutor(LocalFileStore()).execute_delete(_record_for(path))

        assert outcome.succeeded
        assert outcome.action == ActionType.DELETE
        assert outcome.size_before == 50
        assert not path.exists()

    def test_dry_run_keeps_file(
        self, tmp_path: Path, make_file: FileFactory, recording_store: Any
    ) -> None:
        """Dry-run reports the deletion without performing it."""
        path = make_file(tmp_path / "q" / "old.bak", size=50)

        outcome = ActionExecutor(recording_store, dry_run=True).execute_delete(_record_for(path))

        assert outcome.succeeded
        assert path.exists()
        assert recording_store.calls == []

    def test_vanished_file(self, tmp_path: Path, make_file: FileFactory) -> None:
        """A file removed concurrently reports PATH_NOT_FOUND."""
        path = make_file(tmp_path / "q" / "old.bak")
        record = _record_for(path)
        path.unlink()

        outcome = ActionExecutor(LocalFileStore()).execute_delete(record)

        assert outcome.failed
        assert outcome.error_kind == ErrorKind.PATH_NOT_FOUND
