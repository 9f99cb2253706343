"""Configuration commands for opaque-smartid CLI.

Commands:
    config init     - Create a configuration file
    config validate - Validate a configuration file
    config path     - Show the default configuration path
    config show     - Display configuration (salt masked)
"""

from __future__ import annotations

import json
import secrets
import sys
from pathlib import Path

import click

from opaque_smartid.config import AppConfig, LoggingConfig, SmartIDPolicy
from opaque_smartid.exceptions import ConfigurationError
from opaque_smartid.security.salt import StaticSaltProvider
from opaque_smartid.utils.file_helpers import get_config_path

# Length in bytes of salts generated by `config init --generate-salt`
GENERATED_SALT_BYTES = 32


def load_app_config(path: Path | None) -> AppConfig:
    """Load configuration from path or the default location.

    Raises:
        click.ClickException: If config not found or invalid.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise click.ClickException(
            f"Configuration not found at {config_path}\n"
            "Run 'opaque-smartid config init' to create configuration."
        )

    try:
        return AppConfig.load_from_file(config_path)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e


@click.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command("init")
@click.option(
    "--path",
    "-p",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Where to write the config (default: OS config location)",
)
@click.option("--scope", help="Scope appended to generated identifiers (e.g. example.org)")
@click.option("--id-attribute", default=None, help="Output attribute name (default: smart_id)")
@click.option("--log-dir", help="Directory for derivation.jsonl diagnostics")
@click.option(
    "--generate-salt",
    is_flag=True,
    help="Generate a random secret salt and store it in the file",
)
@click.option("--force", is_flag=True, help="Overwrite an existing configuration")
def config_init(
    path: Path | None,
    scope: str | None,
    id_attribute: str | None,
    log_dir: str | None,
    generate_salt: bool,
    force: bool,
) -> None:
    """Create a configuration file with default candidates.

    Without --generate-salt the salt must be provided at runtime through
    the OPAQUE_SMARTID_SECRET_SALT environment variable.

    WARNING: Changing the salt later changes every generated identifier.
    """
    config_path = path or get_config_path()
    if config_path.exists() and not force:
        raise click.ClickException(f"Configuration already exists at {config_path} (use --force)")

    options: dict[str, object] = {}
    if scope:
        options["scope"] = scope
    if id_attribute:
        options["id_attribute"] = id_attribute

    salt = secrets.token_hex(GENERATED_SALT_BYTES) if generate_salt else "unset"
    try:
        policy = SmartIDPolicy.from_config(options, salt_provider=StaticSaltProvider(salt))
        app_config = AppConfig(policy=policy, logging=LoggingConfig(log_dir=log_dir))
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    app_config.save_to_file(config_path, include_secret_salt=generate_salt)
    click.echo(f"✓ Configuration written: {config_path}")
    if not generate_salt:
        click.echo("  Set OPAQUE_SMARTID_SECRET_SALT before deriving identifiers.")


@config.command("validate")
@click.option(
    "--path",
    "-p",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to config file (default: OS config location)",
)
def config_validate(path: Path | None) -> None:
    """Validate configuration file.

    Exit codes:
        0: Configuration is valid
        1: Configuration is invalid or not found
    """
    config_path = path or get_config_path()

    try:
        app_config = AppConfig.load_from_file(config_path)
    except (FileNotFoundError, ConfigurationError) as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    policy = app_config.policy
    count = len(policy.candidates)
    click.echo(f"✓ Configuration valid: {config_path}")
    click.echo(f"  {count} candidate{'s' if count != 1 else ''}, output attribute: {policy.id_attribute}")
    click.echo(f"  Scope: {policy.scope or '(none)'}")


@config.command("path")
def config_path_cmd() -> None:
    """Show configuration file path."""
    path = get_config_path()
    click.echo(str(path))

    if not path.exists():
        click.echo("(file does not exist - run 'opaque-smartid config init' to create)", err=True)


@config.command("show")
@click.option(
    "--path",
    "-p",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to config file (default: OS config location)",
)
def config_show(path: Path | None) -> None:
    """Display the effective configuration. The salt is never shown."""
    app_config = load_app_config(path)
    policy_data = app_config.policy.to_config()
    policy_data["secret_salt"] = "**********"
    data = {
        "policy": policy_data,
        "logging": app_config.logging.model_dump(mode="json"),
        "metadata": sorted(app_config.metadata),
    }
    click.echo(json.dumps(data, indent=2))
