"""Applies classifier decisions to the filesystem.

Each method handles exactly one file and never raises for filesystem
errors: failures come back as an ActionOutcome with succeeded=False so
the calling sweep can move on to the next file.
"""

import logging
import os

from filequarantine.core.sizes import format_size
from filequarantine.quarantine.models import ActionOutcome, ActionType, ErrorKind, FileRecord
from filequarantine.quarantine.storage import FileStore

logger = logging.getLogger(__name__)


def _error_kind(error: OSError) -> ErrorKind:
    """Map an OSError to the outcome error category."""
    if isinstance(error, FileNotFoundError):
        return ErrorKind.PATH_NOT_FOUND
    return ErrorKind.IO_FAILURE


class ActionExecutor:
    """Applies truncate, quarantine and delete actions.

    In dry-run mode no FileStore method that mutates anything is
    called, but the returned outcomes are the same as in a live run.

    Attributes:
        _store: Filesystem capability.
        _dry_run: If True, simulate actions without modifying the filesystem.
    """

    def __init__(self, store: FileStore, dry_run: bool = False) -> None:
        """Initialize the ActionExecutor.

        Args:
            store: Filesystem capability used for every operation.
            dry_run: If True, report what would happen without doing it.
        """
        self._store = store
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        """Whether actions are only simulated."""
        return self._dry_run

    def execute_truncate(self, record: FileRecord, threshold_bytes: int) -> ActionOutcome:
        """Shrink a log file to threshold_bytes, discarding trailing content.

        Args:
            record: The oversized log file.
            threshold_bytes: Size the file is cut to.

        Returns:
            TRUNCATE outcome with size_after set to the threshold.
        """
        size_after = min(threshold_bytes, record.size_bytes)
        freed = record.size_bytes - size_after

        if self._dry_run:
            logger.info(
                "Dry-run: would truncate %s (%s -> %s, freeing %s)",
                record.path,
                format_size(record.size_bytes),
                format_size(size_after),
                format_size(freed),
            )
            return self._outcome(ActionType.TRUNCATE, record, size_after=size_after)

        try:
            self._store.truncate(record.path, size_after)
        except OSError as e:
            logger.error("Failed to truncate %s: %s", record.path, e)
            return self._failure(ActionType.TRUNCATE, record, e, size_after=size_after)

        logger.info(
            "Truncated %s (was %s, freed %s)",
            record.path,
            format_size(record.size_bytes),
            format_size(freed),
        )
        return self._outcome(ActionType.TRUNCATE, record, size_after=size_after)

    def execute_quarantine(self, record: FileRecord, destination: str) -> ActionOutcome:
        """Move a file into the quarantine tree and make it read-only.

        Missing ancestor directories of destination are created first.
        If the move succeeds but the permission change fails, the file
        is quarantined anyway and a warning is logged.

        Args:
            record: The file to quarantine.
            destination: Target path inside the quarantine tree.

        Returns:
            QUARANTINE outcome carrying the destination.
        """
        if self._dry_run:
            logger.info("Dry-run: would quarantine %s -> %s", record.path, destination)
            return self._outcome(ActionType.QUARANTINE, record, destination=destination)

        parent = os.path.dirname(destination)
        try:
            self._store.mkdir_all(parent)
        except OSError as e:
            logger.error("Failed to create quarantine directory %s: %s", parent, e)
            return self._failure(ActionType.QUARANTINE, record, e, destination=destination)

        if self._store.exists(destination):
            logger.warning("Replacing previously quarantined copy at %s", destination)

        try:
            self._store.move(record.path, destination)
        except OSError as e:
            logger.error("Failed to quarantine %s: %s", record.path, e)
            return self._failure(ActionType.QUARANTINE, record, e, destination=destination)

        try:
            self._store.set_read_only(destination)
        except OSError as e:
            logger.warning("Quarantined %s but could not make it read-only: %s", destination, e)

        logger.info("Quarantined %s -> %s", record.path, destination)
        return self._outcome(ActionType.QUARANTINE, record, destination=destination)

    def execute_delete(self, record: FileRecord) -> ActionOutcome:
        """Remove an expired file from the quarantine tree.

        Args:
            record: The expired file.

        Returns:
            DELETE outcome.
        """
        if self._dry_run:
            logger.info("Dry-run: would delete %s", record.path)
            return self._outcome(ActionType.DELETE, record)

        try:
            self._store.delete(record.path)
        except OSError as e:
            logger.error("Failed to delete %s: %s", record.path, e)
            return self._failure(ActionType.DELETE, record, e)

        logger.info("Deleted expired file %s (%s)", record.path, format_size(record.size_bytes))
        return self._outcome(ActionType.DELETE, record)

    def _outcome(
        self,
        action: ActionType,
        record: FileRecord,
        *,
        size_after: int | None = None,
        destination: str | None = None,
    ) -> ActionOutcome:
        """Build a successful outcome."""
        return ActionOutcome(
            action=action,
            path=record.path,
            size_before=record.size_bytes,
            succeeded=True,
            dry_run=self._dry_run,
            size_after=size_after,
            destination=destination,
        )

    def _failure(
        self,
        action: ActionType,
        record: FileRecord,
        error: OSError,
        *,
        size_after: int | None = None,
        destination: str | None = None,
    ) -> ActionOutcome:
        """Build a failed outcome from an OSError."""
        return ActionOutcome(
            action=action,
            path=record.path,
            size_before=record.size_bytes,
            succeeded=False,
            dry_run=self._dry_run,
            size_after=size_after,
            destination=destination,
            error_kind=_error_kind(error),
            error=str(error),
        )
