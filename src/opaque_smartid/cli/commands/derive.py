"""Derive command for opaque-smartid CLI.

Derives an identifier from attributes given on the command line, using the
same processing filter as the authentication pipeline. Useful for checking
what identifier a user will receive, and for migrations.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from opaque_smartid.exceptions import NoUsableAttribute
from opaque_smartid.pep.filter import OpaqueSmartIDFilter
from opaque_smartid.pips.metadata import StaticMetadataLookup
from opaque_smartid.telemetry.sink import create_derivation_sink
from opaque_smartid.utils.validation import is_opaque_identifier

from .config import load_app_config


def _parse_attributes(pairs: tuple[str, ...]) -> dict[str, list[str]]:
    """Parse NAME=VALUE pairs; repeated names keep their order."""
    bag: dict[str, list[str]] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected NAME=VALUE, got {pair!r}", param_hint="--attribute")
        bag.setdefault(name, []).append(value)
    return bag


@click.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to config file (default: OS config location)",
)
@click.option(
    "--attribute",
    "-a",
    "attributes",
    multiple=True,
    metavar="NAME=VALUE",
    help="Attribute value (repeatable)",
)
@click.option(
    "--authority",
    "authorities",
    multiple=True,
    help="Authenticating authority (repeatable, oldest first)",
)
@click.option("--source", "source_entity_id", help="Source entity ID")
@click.option("--idp", "idp_entity_id", help="Proxied IdP entity ID")
@click.option("--tag", "tags", multiple=True, help="Source IdP tag (repeatable)")
def derive(
    config_path: Path | None,
    attributes: tuple[str, ...],
    authorities: tuple[str, ...],
    source_entity_id: str | None,
    idp_entity_id: str | None,
    tags: tuple[str, ...],
) -> None:
    """Derive the opaque identifier for a set of attributes.

    Exit codes:
        0: Identifier printed
        1: No usable attribute
    """
    app_config = load_app_config(config_path)
    log_dir = Path(app_config.logging.log_dir) if app_config.logging.log_dir else None

    smartid = OpaqueSmartIDFilter(
        app_config.policy,
        metadata=StaticMetadataLookup(app_config.metadata),
        sink=create_derivation_sink(log_dir, app_config.logging.log_level),
    )
    request = {
        "Attributes": _parse_attributes(attributes),
        "saml:AuthenticatingAuthority": list(authorities),
        "saml:sp:IdP": idp_entity_id,
        "Source": {"entityid": source_entity_id, "tags": list(tags) if tags else None},
    }

    try:
        identifier = smartid.process(request)
    except NoUsableAttribute as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    click.echo(identifier.value)


@click.command()
@click.argument("identifier")
@click.option("--scope", help="Require this scope suffix")
def check(identifier: str, scope: str | None) -> None:
    """Check that IDENTIFIER has the generated identifier format.

    Exit codes:
        0: Format valid
        1: Not a generated identifier
    """
    if is_opaque_identifier(identifier, scope=scope):
        click.echo("✓ Valid opaque identifier")
    else:
        click.echo("✗ Not a generated opaque identifier", err=True)
        sys.exit(1)
