"""Drives one maintenance pass through its sweeps.

A pass moves through a fixed sequence of states::

    IDLE -> TRUNCATING_LOGS -> QUARANTINING_FILES -> EXPIRING_OLD
         -> REPORT_READY -> DONE

TRUNCATING_LOGS is not entered when log truncation is disabled. The
configuration is validated before the first sweep; after that every
per-file problem is recorded in the report and the pass carries on.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING

from filequarantine.core.sizes import format_size
from filequarantine.errors import ConfigurationInvalidError, PathNotFoundError
from filequarantine.quarantine.classifier import (
    classify_for_expiry,
    classify_for_quarantine,
    classify_for_truncation,
)
from filequarantine.quarantine.executor import ActionExecutor
from filequarantine.quarantine.mapper import (
    collapse_roots,
    ensure_disjoint,
    quarantine_destination,
)
from filequarantine.quarantine.models import FileRecord
from filequarantine.quarantine.report import RunContext, RunReport
from filequarantine.quarantine.storage import FileStore, LocalFileStore

if TYPE_CHECKING:
    from filequarantine.core.config import QuarantineConfig
    from filequarantine.notify.base import Notifier

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    """Phase of a maintenance pass."""

    IDLE = "idle"
    TRUNCATING_LOGS = "truncating_logs"
    QUARANTINING_FILES = "quarantining_files"
    EXPIRING_OLD = "expiring_old"
    REPORT_READY = "report_ready"
    DONE = "done"


def _utc_now() -> datetime:
    return datetime.now(UTC)


class RunOrchestrator:
    """Runs the truncation, quarantine and expiry sweeps once.

    Sweeps run strictly one after another. Within a sweep, files can be
    processed by a bounded thread pool when ``max_workers`` is above 1.
    Setting ``cancel_event`` stops the pass before the next phase or
    file; actions already applied stay applied.

    Example:
        >>> orchestrator = RunOrchestrator(config)
        >>> report = orchestrator.run()
        >>> print(report.count_quarantined)

    Args:
        config: Validated run configuration.
        store: Filesystem capability. Defaults to LocalFileStore.
        notifier: Optional sink that receives the finished report.
        clock: Returns the current time; used for age checks.
        cancel_event: Event that requests early termination.
        max_workers: Worker threads per sweep (1 means sequential).
    """

    def __init__(
        self,
        config: QuarantineConfig,
        *,
        store: FileStore | None = None,
        notifier: Notifier | None = None,
        clock: Callable[[], datetime] = _utc_now,
        cancel_event: threading.Event | None = None,
        max_workers: int = 1,
    ) -> None:
        if max_workers < 1:
            msg = f"max_workers must be at least 1, got {max_workers}"
            raise ValueError(msg)

        self._config = config
        self._store = store or LocalFileStore()
        self._executor = ActionExecutor(self._store, dry_run=config.dry_run)
        self._notifier = notifier
        self._clock = clock
        self._cancel_event = cancel_event or threading.Event()
        self._max_workers = max_workers

        self._state = RunState.IDLE
        self._visited: list[RunState] = [RunState.IDLE]
        self._report = RunReport(context=RunContext.from_config(config), dry_run=config.dry_run)

        # Dry-run only: files the quarantine sweep would have placed,
        # keyed by destination, so the expiry sweep sees them too.
        self._placements: dict[str, FileRecord] = {}
        self._placements_lock = threading.Lock()

    @property
    def state(self) -> RunState:
        """Current phase of the pass."""
        return self._state

    @property
    def visited_states(self) -> tuple[RunState, ...]:
        """Every state entered so far, in order."""
        return tuple(self._visited)

    @property
    def report(self) -> RunReport:
        """The report being accumulated."""
        return self._report

    def cancel(self) -> None:
        """Request that the pass stops before the next phase or file."""
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        """Check if cancellation was requested."""
        return self._cancel_event.is_set()

    def validate(self) -> None:
        """Check the configuration before any sweep starts.

        In live mode a missing quarantine root is created here.

        Raises:
            ConfigurationInvalidError: If there is nothing to scan, no
                extension to match, a relative root, or the quarantine
                root cannot be created.
            ConfigurationConflictError: If the quarantine root and a scan
                root overlap.
        """
        config = self._config

        if not config.scan_roots:
            msg = "No scan directories configured"
            raise ConfigurationInvalidError(msg)
        if not config.extensions:
            msg = "No file extensions configured"
            raise ConfigurationInvalidError(msg)

        for root in (*config.scan_roots, config.quarantine_root):
            if not root.is_absolute():
                msg = f"Directories must be absolute paths: {root}"
                raise ConfigurationInvalidError(msg)

        ensure_disjoint(config.scan_roots, config.quarantine_root)

        quarantine_root = str(config.quarantine_root)
        if self._store.exists(quarantine_root):
            return
        if config.dry_run:
            logger.info("Dry-run: quarantine root %s does not exist yet", quarantine_root)
            return
        try:
            self._store.mkdir_all(quarantine_root)
        except OSError as e:
            msg = f"Failed to create quarantine root {quarantine_root}: {e}"
            raise ConfigurationInvalidError(msg) from e
        logger.info("Created quarantine root: %s", quarantine_root)

    def run(self) -> RunReport:
        """Execute the pass and return the finished report.

        Returns:
            The completed RunReport.

        Raises:
            RuntimeError: If this orchestrator has already run.
            ConfigurationInvalidError: See validate().
            ConfigurationConflictError: See validate().
        """
        if self._state != RunState.IDLE:
            msg = f"Orchestrator already ran (state: {self._state.value})"
            raise RuntimeError(msg)

        self.validate()

        if self._config.truncate_logs and not self.cancelled:
            self._enter(RunState.TRUNCATING_LOGS)
            self._truncation_sweep()

        if not self.cancelled:
            self._enter(RunState.QUARANTINING_FILES)
            self._quarantine_sweep()

        if not self.cancelled:
            self._enter(RunState.EXPIRING_OLD)
            self._expiry_sweep()

        if self.cancelled:
            logger.warning("Run cancelled; actions already applied are kept")

        self._report.finalize(cancelled=self.cancelled)
        self._enter(RunState.REPORT_READY)
        self._deliver()
        self._enter(RunState.DONE)
        return self._report

    def _enter(self, state: RunState) -> None:
        logger.debug("State %s -> %s", self._state.value, state.value)
        self._state = state
        self._visited.append(state)

    # === Sweeps ===

    def _truncation_sweep(self) -> None:
        logger.info(
            "Starting log truncation (limit %s)", format_size(self._config.truncate_size)
        )
        self._process(self._scan_roots(), self._handle_truncation)
        logger.info(
            "Log truncation complete: %d files truncated (%s freed)",
            self._report.count_truncated,
            format_size(self._report.total_size_freed),
        )

    def _handle_truncation(self, record: FileRecord) -> None:
        decision = classify_for_truncation(record, self._config)
        if decision.is_skip:
            return
        outcome = self._executor.execute_truncate(record, self._config.truncate_size)
        self._report.record(outcome)

    def _quarantine_sweep(self) -> None:
        logger.info("Starting file scan and quarantine")
        self._process(self._scan_roots(), self._handle_quarantine)
        logger.info(
            "Quarantine complete: %d files quarantined (%s)",
            self._report.count_quarantined,
            format_size(self._report.total_size_quarantined),
        )

    def _handle_quarantine(self, record: FileRecord) -> None:
        self._report.note_scanned()
        decision = classify_for_quarantine(record, self._config, self._clock())
        if decision.is_skip:
            logger.debug("Skipping %s: %s", record.path, decision.reason.value)
            return

        destination = quarantine_destination(record.path, self._config.quarantine_root)
        outcome = self._executor.execute_quarantine(record, destination)
        self._report.record(outcome)

        if outcome.succeeded and outcome.dry_run:
            with self._placements_lock:
                self._placements[destination] = FileRecord(
                    path=destination,
                    size_bytes=record.size_bytes,
                    modified_at=record.modified_at,
                )

    def _expiry_sweep(self) -> None:
        quarantine_root = str(self._config.quarantine_root)
        logger.info(
            "Checking for quarantined files older than %d days", self._config.retention_days
        )

        before = self._report.count_deleted
        self._process(self._quarantine_files(quarantine_root), self._handle_expiry)
        deleted = self._report.count_deleted - before

        if deleted and not self._config.dry_run:
            pruned = self._store.remove_empty_dirs(quarantine_root)
            logger.debug("Pruned %d empty directories under %s", pruned, quarantine_root)

        logger.info(
            "Cleanup complete: %d files deleted (%s)",
            self._report.count_deleted,
            format_size(self._report.total_size_deleted),
        )

    def _handle_expiry(self, record: FileRecord) -> None:
        decision = classify_for_expiry(record, self._config, self._clock())
        if decision.is_skip:
            return
        outcome = self._executor.execute_delete(record)
        self._report.record(outcome)

    # === Traversal ===

    def _scan_roots(self) -> Iterator[FileRecord]:
        """Yield each file under the scan roots once, skipping missing roots."""
        configured = self._config.scan_roots
        roots = collapse_roots(configured)
        if len(roots) < len(configured):
            logger.debug("Scanning %d of %d roots; the rest overlap", len(roots), len(configured))

        seen: set[str] = set()
        for root in roots:
            if self.cancelled:
                return
            try:
                records = self._store.list_files(str(root))
            except PathNotFoundError as e:
                logger.warning("Skipping scan root: %s", e)
                continue
            logger.info("Scanning: %s", root)
            for record in records:
                if record.path in seen:
                    continue
                seen.add(record.path)
                yield record

    def _quarantine_files(self, quarantine_root: str) -> Iterator[FileRecord]:
        """Yield files in the quarantine tree.

        In dry-run mode the files the quarantine sweep would have
        placed are included, replacing any existing file at the same
        destination.
        """
        with self._placements_lock:
            placements = dict(self._placements)

        try:
            records: Iterable[FileRecord] = self._store.list_files(quarantine_root)
        except PathNotFoundError as e:
            logger.warning("Quarantine directory does not exist: %s", e)
            records = ()

        for record in records:
            if record.path not in placements:
                yield record
        yield from placements.values()

    def _process(
        self,
        records: Iterable[FileRecord],
        handler: Callable[[FileRecord], None],
    ) -> None:
        """Apply handler to every record, sequentially or on a worker pool."""

        def _guarded(record: FileRecord) -> None:
            if self.cancelled:
                return
            handler(record)

        if self._max_workers == 1:
            for record in records:
                if self.cancelled:
                    return
                _guarded(record)
            return

        with ThreadPoolExecutor(
            max_workers=self._max_workers,
            thread_name_prefix="quarantine-sweep",
        ) as pool:
            futures = []
            for record in records:
                if self.cancelled:
                    break
                futures.append(pool.submit(_guarded, record))
            for future in futures:
                future.result()

    # === Notification ===

    def _deliver(self) -> None:
        if self._notifier is None:
            return
        if self._notifier.deliver(self._report):
            logger.info("Report delivered")
        else:
            logger.error("Report delivery failed; the maintenance pass itself completed")

