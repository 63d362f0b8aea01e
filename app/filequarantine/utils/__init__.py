"""Utility modules for file-quarantine.

This module exports commonly used utility functions.
"""

from filequarantine.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from filequarantine.utils.shell import PipeResult, locate_command, pipe_to_command

__all__ = [
    "PipeResult",
    "console",
    "err_console",
    "locate_command",
    "pipe_to_command",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
