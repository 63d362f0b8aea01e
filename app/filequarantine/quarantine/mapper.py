"""Mapping between original paths and the quarantine tree.

A quarantined file keeps its full original path as a subpath of the
quarantine root, so ``/srv/app/db/dump.sql`` quarantined under
``/var/quarantine`` lands at ``/var/quarantine/srv/app/db/dump.sql``.
"""

import os
from collections.abc import Iterable
from pathlib import Path

from filequarantine.errors import ConfigurationConflictError, PathOutsideScanError


def quarantine_destination(source: str, quarantine_root: str | Path) -> str:
    """Derive the quarantine path for an absolute source path.

    Leading separators are stripped and the remainder is appended to
    the quarantine root unchanged, so every intermediate directory
    name is preserved.

    Args:
        source: Absolute path of the file to quarantine.
        quarantine_root: Root of the quarantine tree.

    Returns:
        Destination path inside the quarantine tree.

    Raises:
        PathOutsideScanError: If source is not absolute.
    """
    if not os.path.isabs(source):
        msg = f"Cannot quarantine a relative path: {source}"
        raise PathOutsideScanError(msg)

    relative = source.lstrip(os.sep)
    if not relative:
        msg = f"Cannot quarantine the filesystem root: {source}"
        raise PathOutsideScanError(msg)

    return os.path.join(os.fspath(quarantine_root), relative)


def original_path(destination: str, quarantine_root: str | Path) -> str:
    """Recover the original absolute path of a quarantined file.

    Args:
        destination: Path inside the quarantine tree.
        quarantine_root: Root of the quarantine tree.

    Returns:
        The absolute path the file was quarantined from.

    Raises:
        PathOutsideScanError: If destination is not inside the quarantine root.
    """
    root = os.fspath(quarantine_root).rstrip(os.sep)
    prefix = root + os.sep
    if not destination.startswith(prefix) or destination == prefix:
        msg = f"Path is not inside quarantine root {root}: {destination}"
        raise PathOutsideScanError(msg)
    return os.sep + destination[len(prefix) :]


def is_within(candidate: str | Path, root: str | Path) -> bool:
    """Check if candidate is root itself or lies below it.

    Both paths are resolved (symlinks, ``..``) before comparison.

    Args:
        candidate: Path to test.
        root: Potential ancestor.

    Returns:
        True if candidate equals or is a descendant of root.
    """
    candidate_real = os.path.realpath(candidate)
    root_real = os.path.realpath(root)
    try:
        return os.path.commonpath([candidate_real, root_real]) == root_real
    except ValueError:
        # Paths on different drives
        return False


def ensure_disjoint(scan_roots: Iterable[str | Path], quarantine_root: str | Path) -> None:
    """Ensure the quarantine tree and the scan roots do not overlap.

    A quarantine root inside a scan root would make every run
    re-quarantine its own output; a scan root inside the quarantine
    root would let the expiry sweep delete live files.

    Args:
        scan_roots: Configured scan directories.
        quarantine_root: Root of the quarantine tree.

    Raises:
        ConfigurationConflictError: If any scan root overlaps the quarantine root.
    """
    for scan_root in scan_roots:
        if is_within(quarantine_root, scan_root):
            msg = f"Quarantine root {quarantine_root} must not be inside scan root {scan_root}"
            raise ConfigurationConflictError(msg)
        if is_within(scan_root, quarantine_root):
            msg = f"Scan root {scan_root} must not be inside quarantine root {quarantine_root}"
            raise ConfigurationConflictError(msg)


def collapse_roots(roots: Iterable[str | Path]) -> list[Path]:
    """Drop duplicate roots and roots nested inside another root.

    Order of first appearance is kept. A root that contains a root seen
    earlier takes that root's place.

    Args:
        roots: Configured scan directories.

    Returns:
        Roots that are pairwise disjoint.
    """
    kept: list[Path] = []
    for raw in roots:
        root = Path(raw)
        if any(is_within(root, other) for other in kept):
            continue
        covered = [i for i, other in enumerate(kept) if is_within(other, root)]
        if covered:
            kept[covered[0]] = root
            kept = [other for i, other in enumerate(kept) if i not in covered[1:]]
        else:
            kept.append(root)
    return kept
