"""CLI commands for file-quarantine."""

from filequarantine.cli.commands import config, run

__all__ = ["config", "run"]
