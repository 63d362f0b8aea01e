"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from filequarantine import __version__
from filequarantine.cli.commands import config, run
from filequarantine.utils.log import setup_logging

app = typer.Typer(
    name="file-quarantine",
    help="Quarantine stale files, expire old quarantine and trim oversized logs.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"file-quarantine version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log every decision, including skipped files.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Only log warnings and errors.",
        ),
    ] = False,
) -> None:
    """file-quarantine - Filesystem hygiene for servers.

    Moves aged files with configured extensions into a mirrored
    quarantine tree, deletes quarantined files past their retention
    period and optionally truncates oversized logs.
    """
    setup_logging(verbose=verbose, quiet=quiet)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


app.add_typer(run.app, name="run")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
