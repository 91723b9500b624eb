"""Config command implementation.

Shows the effective configuration and writes the default configuration
file.
"""

from typing import Annotated

import typer
from rich.syntax import Syntax

from devstrap.cli.types import ConfigOption, fail, load_config_or_exit
from devstrap.core.config import dump_config, save_config
from devstrap.core.errors import ConfigError
from devstrap.core.paths import get_config_path
from devstrap.models.config import DevstrapConfig
from devstrap.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or initialize the configuration file.",
    no_args_is_help=True,
)


@app.command()
def show(config_path: ConfigOption = None) -> None:
    """Print the effective configuration as TOML.

    Values missing from the file are shown with their defaults.
    """
    path = config_path or get_config_path()
    config = load_config_or_exit(path)

    if not path.exists():
        print_info(f"No configuration file at {path}; showing defaults.")
    console.print(Syntax(dump_config(config), "toml", background_color="default", word_wrap=True))


@app.command()
def init(
    config_path: ConfigOption = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing configuration file.",
        ),
    ] = False,
) -> None:
    """Write the default configuration file."""
    path = config_path or get_config_path()

    if path.exists() and not force:
        print_error(f"Configuration already exists: {path}")
        print_info("Use --force to overwrite.")
        raise typer.Exit(code=ConfigError.exit_code)

    try:
        saved = save_config(DevstrapConfig(), path)
    except ConfigError as e:
        raise fail(e) from e

    print_success(f"Configuration written to {saved}")
