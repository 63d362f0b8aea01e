"""Run report accumulated over one maintenance pass.

The orchestrator owns the report while the sweeps run and hands it to
renderers and notifiers once the pass is finished.
"""

import socket
import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from filequarantine import __version__
from filequarantine.core.config import QuarantineConfig
from filequarantine.quarantine.models import ActionOutcome, ActionType


@dataclass(frozen=True, slots=True)
class RunContext:
    """Configuration echoed into rendered reports.

    Attributes:
        hostname: Machine the run executed on.
        scan_roots: Scanned directories.
        quarantine_root: Root of the quarantine tree.
        extensions: Monitored extensions, sorted.
        retention_days: Retention window in days.
        truncate_logs: Whether log truncation was enabled.
        truncate_size: Truncation threshold in bytes.
    """

    hostname: str
    scan_roots: tuple[str, ...]
    quarantine_root: str
    extensions: tuple[str, ...]
    retention_days: int
    truncate_logs: bool
    truncate_size: int

    @classmethod
    def from_config(cls, config: QuarantineConfig) -> "RunContext":
        """Capture the reportable parts of a configuration."""
        return cls(
            hostname=socket.gethostname(),
            scan_roots=tuple(str(root) for root in config.scan_roots),
            quarantine_root=str(config.quarantine_root),
            extensions=tuple(sorted(config.extensions)),
            retention_days=config.retention_days,
            truncate_logs=config.truncate_logs,
            truncate_size=config.truncate_size,
        )


@dataclass(slots=True)
class RunReport:
    """Counters and per-file outcomes of one run.

    Success counters only move for successful outcomes; failed
    outcomes go to ``failures``. ``record`` is safe to call from
    several worker threads.

    Attributes:
        context: Configuration summary for renderers.
        dry_run: Whether the run only simulated actions.
        started_at: When the run began.
        generated_at: When the report was finalized (None while running).
        cancelled: Whether the run stopped early on request.
        files_scanned: Files examined by the quarantine sweep.
        quarantined: Successful QUARANTINE outcomes, in order.
        deleted: Successful DELETE outcomes, in order.
        truncated: Successful TRUNCATE outcomes, in order.
        failures: Failed outcomes of any action, in order.
    """

    context: RunContext
    dry_run: bool = False
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    generated_at: datetime | None = None
    cancelled: bool = False
    files_scanned: int = 0
    quarantined: list[ActionOutcome] = field(default_factory=list)
    deleted: list[ActionOutcome] = field(default_factory=list)
    truncated: list[ActionOutcome] = field(default_factory=list)
    failures: list[ActionOutcome] = field(default_factory=list)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def record(self, outcome: ActionOutcome) -> None:
        """Fold one outcome into the report.

        SKIP outcomes carry nothing to report and are ignored.

        Args:
            outcome: The outcome to append.
        """
        if outcome.action == ActionType.SKIP:
            return

        with self._lock:
            if outcome.failed:
                self.failures.append(outcome)
            elif outcome.action == ActionType.QUARANTINE:
                self.quarantined.append(outcome)
            elif outcome.action == ActionType.DELETE:
                self.deleted.append(outcome)
            else:
                self.truncated.append(outcome)

    def note_scanned(self) -> None:
        """Count one examined file."""
        with self._lock:
            self.files_scanned += 1

    def finalize(self, cancelled: bool = False) -> None:
        """Stamp the report as complete."""
        with self._lock:
            self.cancelled = cancelled
            self.generated_at = datetime.now(UTC)

    @property
    def count_quarantined(self) -> int:
        """Number of files quarantined."""
        return len(self.quarantined)

    @property
    def total_size_quarantined(self) -> int:
        """Bytes moved into quarantine."""
        return sum(o.bytes_affected for o in self.quarantined)

    @property
    def count_deleted(self) -> int:
        """Number of expired files deleted."""
        return len(self.deleted)

    @property
    def total_size_deleted(self) -> int:
        """Bytes deleted from quarantine."""
        return sum(o.bytes_affected for o in self.deleted)

    @property
    def count_truncated(self) -> int:
        """Number of log files truncated."""
        return len(self.truncated)

    @property
    def total_size_freed(self) -> int:
        """Bytes freed by truncation."""
        return sum(o.bytes_affected for o in self.truncated)

    @property
    def count_failed(self) -> int:
        """Number of actions that failed."""
        return len(self.failures)

    def summary(self) -> dict[str, int]:
        """Counters as a flat dictionary."""
        return {
            "files_scanned": self.files_scanned,
            "quarantined": self.count_quarantined,
            "quarantined_bytes": self.total_size_quarantined,
            "deleted": self.count_deleted,
            "deleted_bytes": self.total_size_deleted,
            "truncated": self.count_truncated,
            "freed_bytes": self.total_size_freed,
            "failed": self.count_failed,
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "metadata": {
                "hostname": self.context.hostname,
                "version": __version__,
                "dry_run": self.dry_run,
                "cancelled": self.cancelled,
                "started_at": self.started_at.isoformat(),
                "generated_at": self.generated_at.isoformat() if self.generated_at else None,
                "scan_roots": list(self.context.scan_roots),
                "quarantine_root": self.context.quarantine_root,
                "extensions": list(self.context.extensions),
                "retention_days": self.context.retention_days,
                "truncate_logs": self.context.truncate_logs,
                "truncate_size": self.context.truncate_size,
            },
            "summary": self.summary(),
            "quarantined": [o.to_dict() for o in self.quarantined],
            "deleted": [o.to_dict() for o in self.deleted],
            "truncated": [o.to_dict() for o in self.truncated],
            "failures": [o.to_dict() for o in self.failures],
        }
