"""Quarantine domain models.

This module defines the records passed between the sweeps: the file
metadata produced by traversal, the decision taken for a file, and the
outcome of applying that decision.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

SECONDS_PER_DAY = 86400


class ActionType(str, Enum):
    """Terminal action decided for a file.

    Attributes:
        SKIP: Leave the file untouched.
        TRUNCATE: Shrink an oversized log file in place.
        QUARANTINE: Move the file into the quarantine tree.
        DELETE: Remove an expired file from the quarantine tree.
    """

    SKIP = "skip"
    TRUNCATE = "truncate"
    QUARANTINE = "quarantine"
    DELETE = "delete"


class SkipReason(str, Enum):
    """Why a file was left untouched in a sweep."""

    EXCLUDED = "excluded"
    ROUTED_TO_TRUNCATION = "routed_to_truncation"
    EXTENSION_NOT_CONFIGURED = "extension_not_configured"
    TOO_YOUNG = "too_young"
    NOT_A_LOG = "not_a_log"
    WITHIN_THRESHOLD = "within_threshold"
    NOT_EXPIRED = "not_expired"


class ErrorKind(str, Enum):
    """Category of a failed action.

    Attributes:
        IO_FAILURE: The filesystem call failed (permissions, disk, ...).
        PATH_NOT_FOUND: The file vanished before the action ran.
    """

    IO_FAILURE = "io_failure"
    PATH_NOT_FOUND = "path_not_found"


@dataclass(frozen=True, slots=True)
class FileRecord:
    """A regular file discovered during a sweep.

    Attributes:
        path: Absolute path of the file.
        size_bytes: File size in bytes.
        modified_at: Last modification time (timezone-aware, UTC).
    """

    path: str
    size_bytes: int
    modified_at: datetime

    def __post_init__(self) -> None:
        """Validate file record data after initialization."""
        if not self.path:
            msg = "Path cannot be empty"
            raise ValueError(msg)
        if self.size_bytes < 0:
            msg = f"Size cannot be negative, got {self.size_bytes}"
            raise ValueError(msg)

    def age_minutes(self, now: datetime) -> float:
        """Minutes elapsed since the last modification."""
        return (now - self.modified_at).total_seconds() / 60

    def age_days(self, now: datetime) -> int:
        """Whole days elapsed since the last modification (floored)."""
        return int((now - self.modified_at).total_seconds() // SECONDS_PER_DAY)


@dataclass(frozen=True, slots=True)
class Decision:
    """Classifier verdict for one file in one sweep.

    Attributes:
        action: The action to apply.
        reason: Why the file is skipped (None unless action is SKIP).
    """

    action: ActionType
    reason: SkipReason | None = None

    @property
    def is_skip(self) -> bool:
        """Check if the file is left untouched."""
        return self.action == ActionType.SKIP


@dataclass(frozen=True, slots=True)
class ActionOutcome:
    """Result of applying (or simulating) one action on one file.

    Attributes:
        action: The action that was applied.
        path: Absolute path of the source file.
        size_before: File size before the action.
        succeeded: Whether the action completed.
        dry_run: Whether the action was only simulated.
        size_after: Size after truncation (TRUNCATE only).
        destination: Quarantine destination (QUARANTINE only).
        error_kind: Failure category when succeeded is False.
        error: Failure message when succeeded is False.
        timestamp: When the outcome was recorded.
    """

    action: ActionType
    path: str
    size_before: int
    succeeded: bool
    dry_run: bool = False
    size_after: int | None = None
    destination: str | None = None
    error_kind: ErrorKind | None = None
    error: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def failed(self) -> bool:
        """Check if the action failed."""
        return not self.succeeded

    @property
    def bytes_affected(self) -> int:
        """Bytes freed by a truncation, or the file size for other actions."""
        if self.action == ActionType.TRUNCATE and self.size_after is not None:
            return self.size_before - self.size_after
        return self.size_before

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "action": self.action.value,
            "path": self.path,
            "size_before": self.size_before,
            "size_after": self.size_after,
            "destination": self.destination,
            "succeeded": self.succeeded,
            "dry_run": self.dry_run,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "error": self.error,
            "timestamp": self.timestamp.isoformat(),
        }
