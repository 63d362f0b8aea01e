"""CLI package for file-quarantine.

This package contains the Typer application and all subcommands.
"""

from filequarantine.cli.main import app

__all__ = ["app"]
