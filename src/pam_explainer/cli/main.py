"""Main CLI entry point for pam-explainer.

Defines the CLI group and registers all subcommands.

Commands:
    explain  - Evaluate a PAM policy file and explain each facility's verdict
    serve    - Run the HTTP API
    config   - Configuration commands
        show - Display effective configuration
        path - Show config file path

Usage:
    pam-explainer -h, --help                       Show help message
    pam-explainer -v, --version                    Show version
    pam-explainer explain /etc/pam.d/sshd          Explain a policy (prompts on a TTY)
    pam-explainer explain sshd results.json        Replay stored outcomes
    pam-explainer serve --port 3000                Run the HTTP API

Subcommand help:
    pam-explainer COMMAND -h      Show help for a specific command
"""

import sys

import click

from pam_explainer import __version__

from .commands.config import config
from .commands.explain import explain
from .commands.serve import serve


class ReorderedGroup(click.Group):
    """Custom group that shows commands before custom help text."""

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Add extra help after commands section."""
        formatter.write(
            """
Quick Start:
  pam-explainer explain /etc/pam.d/sshd        Answer each module's outcome
  pam-explainer explain sshd --no-interactive  Assume unknown modules fail

Replaying Outcomes:
  pam-explainer explain sshd --save-results results.json
  pam-explainer explain sshd results.json

Overriding One Rule (hash from --json output):
  pam-explainer explain sshd results.json --override <rule_hash>=success
"""
        )


@click.group(
    cls=ReorderedGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.pass_context
def cli(ctx: click.Context, version: bool) -> None:
    """pam-explainer: see what a PAM stack will decide before deploying it."""
    if version:
        click.echo(f"pam-explainer {__version__}")
        sys.exit(0)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(explain)
cli.add_command(serve)
cli.add_command(config)


def main() -> None:
    """CLI entry point."""
    cli()
