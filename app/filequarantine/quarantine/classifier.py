"""Per-file decisions for the three sweeps.

Every function here is pure: it looks at one FileRecord, the run
configuration and the current time, and returns a Decision. Nothing
touches the filesystem.
"""

import fnmatch
import os
from collections.abc import Iterable
from datetime import datetime

from filequarantine.core.config import QuarantineConfig
from filequarantine.quarantine.models import ActionType, Decision, FileRecord, SkipReason

LOG_EXTENSION = "log"


def extension_of(path: str) -> str:
    """Return the final dot-suffix of a file name, lowercased.

    ``app.log.1`` yields ``"1"``; a name without a dot yields ``""``.

    Args:
        path: File path or name.

    Returns:
        Lowercase extension without the dot.
    """
    name = os.path.basename(path)
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1].lower()


def matches_extension(path: str, extensions: Iterable[str]) -> bool:
    """Check if a file name ends with ``.<ext>`` for any configured extension.

    Matching is case-insensitive. Compound suffixes such as ``log.1``
    match only when configured as such.

    Args:
        path: File path or name.
        extensions: Lowercase extensions without a leading dot.

    Returns:
        True if the file carries one of the extensions.
    """
    name = os.path.basename(path).lower()
    return any(name.endswith(f".{ext}") for ext in extensions)


def is_excluded(path: str, patterns: Iterable[str]) -> bool:
    """Check if a path matches any exclude pattern.

    Patterns are matched against the full path; ``*`` also matches
    ``/``, so ``*/.git/*`` excludes everything below any ``.git``.

    Args:
        path: Absolute file path.
        patterns: Glob-style patterns.

    Returns:
        True if the path is excluded.
    """
    return any(fnmatch.fnmatchcase(path, pattern) for pattern in patterns)


def classify_for_truncation(record: FileRecord, config: QuarantineConfig) -> Decision:
    """Decide whether a log file is truncated.

    Age is not considered: an oversized log is truncated as soon as it
    is seen.
    """
    if is_excluded(record.path, config.exclude_patterns):
        return Decision(ActionType.SKIP, SkipReason.EXCLUDED)
    if extension_of(record.path) != LOG_EXTENSION:
        return Decision(ActionType.SKIP, SkipReason.NOT_A_LOG)
    if record.size_bytes <= config.truncate_size:
        return Decision(ActionType.SKIP, SkipReason.WITHIN_THRESHOLD)
    return Decision(ActionType.TRUNCATE)


def classify_for_quarantine(
    record: FileRecord,
    config: QuarantineConfig,
    now: datetime,
) -> Decision:
    """Decide whether a file is moved into quarantine.

    Checks run in a fixed order and the first match wins:

    1. Excluded paths are skipped.
    2. ``.log`` files are skipped when truncation is enabled, so a file
       is never both truncated and quarantined in one run.
    3. Files without a configured extension are skipped.
    4. Files younger than ``min_file_age_minutes`` are skipped. A file
       exactly at the threshold is eligible.

    Args:
        record: The file under consideration.
        config: Run configuration.
        now: Reference time for the age check.

    Returns:
        QUARANTINE or SKIP with the reason.
    """
    if is_excluded(record.path, config.exclude_patterns):
        return Decision(ActionType.SKIP, SkipReason.EXCLUDED)

    if config.truncate_logs and extension_of(record.path) == LOG_EXTENSION:
        return Decision(ActionType.SKIP, SkipReason.ROUTED_TO_TRUNCATION)

    if not matches_extension(record.path, config.extensions):
        return Decision(ActionType.SKIP, SkipReason.EXTENSION_NOT_CONFIGURED)

    if record.age_minutes(now) < config.min_file_age_minutes:
        return Decision(ActionType.SKIP, SkipReason.TOO_YOUNG)

    return Decision(ActionType.QUARANTINE)


def classify_for_expiry(
    record: FileRecord,
    config: QuarantineConfig,
    now: datetime,
) -> Decision:
    """Decide whether a quarantined file has expired.

    Age is measured from the file's modification time, which a move
    into quarantine preserves.
    """
    if record.age_days(now) >= config.retention_days:
        return Decision(ActionType.DELETE)
    return Decision(ActionType.SKIP, SkipReason.NOT_EXPIRED)
