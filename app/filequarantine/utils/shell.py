"""Hand documents to local programs over standard input.

Used to pass finished report e-mails to the system mailer.
"""

import os
import shutil
import subprocess
from dataclasses import dataclass

# Cron jobs usually run with a PATH that lacks the sbin directories
EXTRA_SEARCH_DIRS = ("/usr/sbin", "/usr/lib", "/sbin")


@dataclass(frozen=True, slots=True)
class PipeResult:
    """Exit status of a piped command.

    Attributes:
        returncode: Exit code of the command.
        stderr: Whatever the command wrote to standard error.
    """

    returncode: int
    stderr: str

    @property
    def success(self) -> bool:
        return self.returncode == 0


def locate_command(name: str) -> str | None:
    """Find an executable on PATH or in the usual sbin directories.

    Args:
        name: Executable name, e.g. ``"sendmail"``.

    Returns:
        Full path to the executable, or None if it is not installed.
    """
    search_path = os.pathsep.join((os.environ.get("PATH", os.defpath), *EXTRA_SEARCH_DIRS))
    return shutil.which(name, path=search_path)


def pipe_to_command(args: list[str], document: str, *, timeout: float = 60.0) -> PipeResult:
    """Write document to a command's stdin and wait for it to exit.

    Standard output is discarded.

    Args:
        args: Command and arguments.
        document: Text written to standard input.
        timeout: Seconds to wait before giving up.

    Returns:
        PipeResult with the exit code and standard error.

    Raises:
        subprocess.TimeoutExpired: If the command does not exit in time.
        OSError: If the command cannot be started.
    """
    completed = subprocess.run(
        args,
        input=document,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.PIPE,
        text=True,
        timeout=timeout,
        check=False,
    )
    return PipeResult(returncode=completed.returncode, stderr=completed.stderr)
