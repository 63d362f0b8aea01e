"""Logging setup for the CLI.

Library modules only create loggers; the CLI decides where records go.
"""

import logging

from rich.logging import RichHandler

from filequarantine.utils.formatting import err_console


def setup_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Route log records to stderr through Rich.

    Args:
        verbose: Show debug records (skip decisions and the like).
        quiet: Show warnings and errors only. Ignored when verbose is set.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = RichHandler(
        console=err_console,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
