"""Request context supplied by the hosting authentication pipeline."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["RequestContext"]


class RequestContext(BaseModel):
    """Per-event context for identifier derivation.

    Built by the caller for each authentication event. Read-only to the
    deriver.

    Attributes:
        idp_entity_id: Asserting IdP behind a proxy (absent outside
            proxy/gateway deployments).
        authenticating_authorities: Authorities the assertion traversed,
            oldest first. The last one is the most specific.
        idp_tags: Classification tags of the source IdP, None if unknown.
        source_entity_id: Entity ID of the source the attributes came from.
    """

    idp_entity_id: str | None = None
    authenticating_authorities: tuple[str, ...] = Field(default_factory=tuple)
    idp_tags: frozenset[str] | None = None
    source_entity_id: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def effective_authority(self) -> str | None:
        """Most specific authority: last of the chain, else the source entity."""
        if self.authenticating_authorities:
            return self.authenticating_authorities[-1]
        return self.source_entity_id or None

    @property
    def display_entity_id(self) -> str | None:
        """Entity shown to the end user: the proxied IdP when present."""
        return self.idp_entity_id or self.source_entity_id
