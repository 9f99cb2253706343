"""Policy Information Points (PIPs) - External attribute sources.

- metadata.py: entity display names and IdP tags
"""

from opaque_smartid.pips.metadata import (
    EntityMetadata,
    MetadataLookup,
    StaticMetadataLookup,
    resolve_display_label,
)

__all__ = [
    "EntityMetadata",
    "MetadataLookup",
    "StaticMetadataLookup",
    "resolve_display_label",
]
