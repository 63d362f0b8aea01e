"""Config file commands.

Shows, creates and locates the TOML configuration file.
"""

from pathlib import Path
from typing import Annotated

import tomli_w
import typer
from rich.syntax import Syntax

from filequarantine.core.config import AppConfig, config_to_dict, load_config, save_config
from filequarantine.core.paths import get_config_path
from filequarantine.errors import ConfigurationError
from filequarantine.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Manage the configuration file.",
    no_args_is_help=True,
)

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to the config file.",
    ),
]


@app.command()
def show(config_path: ConfigOption = None) -> None:
    """Print the effective configuration, defaults included."""
    try:
        app_config = load_config(config_path)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    rendered = tomli_w.dumps(config_to_dict(app_config))
    console.print(Syntax(rendered, "toml", background_color="default"))


@app.command()
def init(
    config_path: ConfigOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file populated with the defaults."""
    target = config_path or get_config_path()

    if target.exists() and not force:
        print_error(f"Config file already exists: {target}")
        print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1)

    try:
        written = save_config(AppConfig(), target)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {written}")
    print_info("Add scan_roots to the quarantine section before running.")


@app.command()
def path() -> None:
    """Print the config file location."""
    typer.echo(str(get_config_path()))
