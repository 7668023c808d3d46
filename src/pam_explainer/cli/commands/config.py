"""Config command group for pam-explainer CLI.

Provides configuration inspection subcommands.
"""

import json
import sys
from pathlib import Path

import click

from pam_explainer.config import load_config
from pam_explainer.utils.config import get_config_path


@click.group()
def config() -> None:
    """Configuration commands."""
    pass


@config.command("show")
@click.option(
    "--path",
    "-p",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to config file (default: OS config location)",
)
def config_show(config_path: Path | None) -> None:
    """Display the effective configuration as JSON.

    Without a config file, shows the built-in defaults.

    Exit codes:
        0: Configuration shown
        1: Configuration file is invalid
    """
    try:
        app_config = load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    click.echo(json.dumps(app_config.model_dump(), indent=2))


@config.command("path")
def config_path_cmd() -> None:
    """Show config file path.

    Displays the OS-appropriate config file location.
    """
    path = get_config_path()
    click.echo(str(path))

    if not path.exists():
        click.echo("(file does not exist - built-in defaults are used)", err=True)
