"""Main CLI entry point for opaque-smartid.

Defines the CLI group and registers all subcommands.

Commands:
    derive  - Derive the identifier for a set of attributes
    check   - Check the format of a generated identifier
    config  - Configuration management commands
        init     - Create a configuration file
        validate - Validate configuration
        path     - Show config file path
        show     - Display configuration

Usage:
    opaque-smartid -h, --help      Show help message
    opaque-smartid -v, --version   Show version
    opaque-smartid derive -a eduPersonPrincipalName=alice@example.org --authority https://idp.example

Subcommand help:
    opaque-smartid COMMAND -h      Show help for a specific command
"""

import sys

import click

from opaque_smartid import __version__

from .commands.config import config
from .commands.derive import check, derive


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.pass_context
def cli(ctx: click.Context, version: bool) -> None:
    """opaque-smartid: opaque, globally unique user identifiers."""
    if version:
        click.echo(f"opaque-smartid {__version__}")
        sys.exit(0)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(derive)
cli.add_command(check)
cli.add_command(config)


def main() -> None:
    """CLI entry point."""
    cli()
