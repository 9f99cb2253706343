"""Entity metadata lookup.

Maps an entity identifier (IdP entity ID) to display data and
classification tags. Used for:
- the human-readable source label in failure reports
- IdP tags for tag gating when the request does not carry them

Display data never influences the identifier value.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "EntityMetadata",
    "MetadataLookup",
    "StaticMetadataLookup",
    "resolve_display_label",
]

# Preferred language when a display name is a language map
DEFAULT_DISPLAY_LANGUAGE = "en"


class EntityMetadata(BaseModel):
    """Metadata for one entity.

    Attributes:
        name: Display name, either a string or a language -> name map.
        tags: Classification tags (e.g. federation or assurance labels).
    """

    name: str | dict[str, str] | None = None
    tags: frozenset[str] = Field(default_factory=frozenset)

    model_config = ConfigDict(frozen=True, extra="ignore")

    def display_name(self, language: str = DEFAULT_DISPLAY_LANGUAGE) -> str | None:
        """Return the display name, preferring the given language."""
        if isinstance(self.name, str):
            return self.name or None
        if self.name:
            return self.name.get(language) or next(iter(self.name.values()), None)
        return None


@runtime_checkable
class MetadataLookup(Protocol):
    """Protocol for entity metadata sources."""

    def display_name(self, entity_id: str) -> str | None:
        """Human-readable label for an entity, None if unknown."""
        ...

    def tags(self, entity_id: str) -> frozenset[str] | None:
        """Classification tags for an entity, None if unknown."""
        ...


class StaticMetadataLookup:
    """Metadata lookup backed by an in-memory mapping.

    Args:
        entities: Entity ID -> EntityMetadata (or raw dict).
        language: Preferred display language.
    """

    def __init__(
        self,
        entities: Mapping[str, EntityMetadata | Mapping] | None = None,
        language: str = DEFAULT_DISPLAY_LANGUAGE,
    ) -> None:
        self._entities = {
            entity_id: meta if isinstance(meta, EntityMetadata) else EntityMetadata.model_validate(meta)
            for entity_id, meta in (entities or {}).items()
        }
        self._language = language

    def display_name(self, entity_id: str) -> str | None:
        meta = self._entities.get(entity_id)
        return meta.display_name(self._language) if meta else None

    def tags(self, entity_id: str) -> frozenset[str] | None:
        meta = self._entities.get(entity_id)
        return meta.tags if meta else None


def resolve_display_label(entity_id: str | None, lookup: MetadataLookup | None) -> str | None:
    """Resolve a display label, falling back to the entity ID itself."""
    if not entity_id:
        return None
    if lookup is not None:
        name = lookup.display_name(entity_id)
        if name:
            return name
    return entity_id
