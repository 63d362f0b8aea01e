"""Filesystem capability used by the sweeps.

The engine never calls ``os`` directly; it goes through a FileStore so
tests can observe or fake every mutating call.
"""

import contextlib
import errno
import logging
import os
import shutil
import stat
import tempfile
from abc import ABC, abstractmethod
from collections.abc import Iterator
from datetime import UTC, datetime

from filequarantine.errors import PathNotFoundError
from filequarantine.quarantine.models import FileRecord

logger = logging.getLogger(__name__)

# Owner and group may read, nobody may write
READ_ONLY_MODE = 0o440


class FileStore(ABC):
    """Abstract filesystem capability.

    Implementations raise OSError subclasses from mutating calls; the
    action executor turns those into failed outcomes.

    Example:
        >>> store = LocalFileStore()
        >>> for record in store.list_files("/srv/app"):
        ...     print(record.path, record.size_bytes)
    """

    @abstractmethod
    def list_files(self, root: str) -> Iterator[FileRecord]:
        """Yield every regular file below root.

        Raises:
            PathNotFoundError: If root is not an existing directory.
        """

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Check if a path exists."""

    @abstractmethod
    def truncate(self, path: str, size_bytes: int) -> None:
        """Shrink a file to exactly size_bytes."""

    @abstractmethod
    def move(self, source: str, destination: str) -> None:
        """Move a file, replacing any file already at destination."""

    @abstractmethod
    def delete(self, path: str) -> None:
        """Remove a file."""

    @abstractmethod
    def mkdir_all(self, path: str) -> None:
        """Create a directory and all missing ancestors."""

    @abstractmethod
    def set_read_only(self, path: str) -> None:
        """Make a file readable by owner and group only, writable by nobody."""

    @abstractmethod
    def remove_empty_dirs(self, root: str) -> int:
        """Remove empty directories below root, leaves first.

        Returns:
            Number of directories removed. Root itself is never removed.
        """


class LocalFileStore(FileStore):
    """FileStore backed by the local filesystem."""

    def list_files(self, root: str) -> Iterator[FileRecord]:
        """Yield every regular file below root.

        Symlinks are neither followed nor reported. Directories that
        cannot be read are logged and skipped.

        Args:
            root: Directory to traverse.

        Returns:
            Lazy iterator of FileRecord in sorted traversal order.

        Raises:
            PathNotFoundError: If root is not an existing directory.
        """
        root_str = os.fspath(root)
        if not os.path.isdir(root_str):
            raise PathNotFoundError(f"Directory does not exist: {root_str}")
        return self._walk(root_str)

    def _walk(self, root: str) -> Iterator[FileRecord]:
        """Traverse root and yield regular files."""

        def _on_error(error: OSError) -> None:
            logger.warning("Cannot read directory %s: %s", error.filename, error.strerror)

        for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
            dirnames.sort()
            for name in sorted(filenames):
                path = os.path.join(dirpath, name)
                try:
                    st = os.lstat(path)
                except FileNotFoundError:
                    logger.debug("File vanished during traversal: %s", path)
                    continue
                except OSError as e:
                    logger.warning("Cannot stat %s: %s", path, e)
                    continue

                if not stat.S_ISREG(st.st_mode):
                    continue

                yield FileRecord(
                    path=path,
                    size_bytes=st.st_size,
                    modified_at=datetime.fromtimestamp(st.st_mtime, tz=UTC),
                )

    def exists(self, path: str) -> bool:
        """Check if a path exists (without following a final symlink)."""
        return os.path.lexists(path)

    def truncate(self, path: str, size_bytes: int) -> None:
        """Shrink a file to exactly size_bytes."""
        os.truncate(path, size_bytes)

    def move(self, source: str, destination: str) -> None:
        """Move a file, atomically when both paths share a filesystem.

        Across filesystems the file is copied next to the destination
        first, verified, renamed into place, and only then is the
        source removed. An interrupted copy therefore never loses the
        source.

        Args:
            source: File to move.
            destination: Target path (parent directory must exist).

        Raises:
            OSError: If the move fails. The source is left in place.
        """
        try:
            os.rename(source, destination)
        except OSError as e:
            if e.errno != errno.EXDEV:
                raise
            logger.debug("Cross-device move, copying %s to %s", source, destination)
            self._copy_then_unlink(source, destination)

    @staticmethod
    def _copy_then_unlink(source: str, destination: str) -> None:
        """Copy source to destination via a temporary file, then unlink source."""
        expected_size = os.lstat(source).st_size
        fd, tmp_path = tempfile.mkstemp(
            dir=os.path.dirname(destination),
            prefix=".quarantine-",
            suffix=".part",
        )
        os.close(fd)

        try:
            # copy2 keeps the mtime, which the expiry sweep relies on
            shutil.copy2(source, tmp_path)
            with open(tmp_path, "rb") as f:
                os.fsync(f.fileno())
            copied_size = os.stat(tmp_path).st_size
            if copied_size != expected_size:
                msg = f"Incomplete copy ({copied_size} of {expected_size} bytes)"
                raise OSError(errno.EIO, msg, source)
            os.replace(tmp_path, destination)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_path)
            raise

        os.unlink(source)

    def delete(self, path: str) -> None:
        """Remove a file."""
        os.unlink(path)

    def mkdir_all(self, path: str) -> None:
        """Create a directory and all missing ancestors."""
        os.makedirs(path, exist_ok=True)

    def set_read_only(self, path: str) -> None:
        """Set mode 0440 on a file."""
        os.chmod(path, READ_ONLY_MODE)

    def remove_empty_dirs(self, root: str) -> int:
        """Remove empty directories below root, leaves first.

        Args:
            root: Directory to prune. Never removed itself.

        Returns:
            Number of directories removed.
        """
        root_str = os.fspath(root)
        removed = 0

        for dirpath, _dirnames, _filenames in os.walk(root_str, topdown=False):
            if dirpath == root_str:
                continue
            try:
                if os.listdir(dirpath):
                    continue
                os.rmdir(dirpath)
                removed += 1
            except OSError as e:
                logger.warning("Cannot remove empty directory %s: %s", dirpath, e)

        return removed
