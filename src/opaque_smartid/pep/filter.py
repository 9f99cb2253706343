"""Authentication processing filter.

Policy Enforcement Point for the hosting authentication pipeline. Reads the
pipeline's request state, runs the deriver and applies the output contract:

- request["Attributes"][id_attribute] = [identifier]
- request["UserID"] = identifier           (if set_userid_attribute)

On failure raises NoUsableAttribute carrying the NOATTRIBUTE error report;
the pipeline must halt the authentication flow and render it.

Request keys read:
    Attributes                     attribute bag (required)
    saml:AuthenticatingAuthority   authority chain, oldest first
    saml:sp:IdP                    proxied IdP entity ID (gateway mode)
    Source.entityid                source entity ID
    Source.tags                    source IdP tags
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any

from opaque_smartid.config import SmartIDPolicy
from opaque_smartid.constants import (
    REQUEST_ATTRIBUTES_KEY,
    REQUEST_AUTHORITIES_KEY,
    REQUEST_PROXIED_IDP_KEY,
    REQUEST_SOURCE_KEY,
    REQUEST_USER_ID_KEY,
)
from opaque_smartid.context.request import RequestContext
from opaque_smartid.deriver.engine import IdentifierDeriver
from opaque_smartid.deriver.result import ErrorReport, Failure, Identifier
from opaque_smartid.exceptions import NoUsableAttribute
from opaque_smartid.pips.metadata import MetadataLookup
from opaque_smartid.security.salt import SecretSaltProvider
from opaque_smartid.telemetry.sink import DiagnosticSink
from opaque_smartid.telemetry.system.system_logger import get_system_logger

__all__ = [
    "OpaqueSmartIDFilter",
    "apply_identifier",
    "build_request_context",
]

_system_logger = get_system_logger()


def build_request_context(
    request: Mapping[str, Any],
    metadata: MetadataLookup | None = None,
) -> RequestContext:
    """Build a RequestContext from pipeline request state.

    IdP tags come from the metadata lookup for the proxied IdP when it knows
    the entity, otherwise from Source.tags.

    Args:
        request: Pipeline request state.
        metadata: Optional entity metadata lookup.

    Returns:
        RequestContext for the deriver.
    """
    source = request.get(REQUEST_SOURCE_KEY) or {}
    idp_entity_id = request.get(REQUEST_PROXIED_IDP_KEY) or None
    authorities = request.get(REQUEST_AUTHORITIES_KEY) or ()
    if isinstance(authorities, str):
        authorities = (authorities,)

    tags = None
    if idp_entity_id and metadata is not None:
        tags = metadata.tags(idp_entity_id)
    if tags is None and source.get("tags") is not None:
        raw_tags = source["tags"]
        if isinstance(raw_tags, str):
            # Single tag not wrapped in a list
            raw_tags = (raw_tags,)
        tags = frozenset(raw_tags)

    return RequestContext(
        idp_entity_id=idp_entity_id,
        authenticating_authorities=tuple(authorities),
        idp_tags=tags,
        source_entity_id=source.get("entityid"),
    )


def apply_identifier(
    request: MutableMapping[str, Any],
    identifier: Identifier,
    policy: SmartIDPolicy,
) -> None:
    """Write the identifier into the request (the output contract)."""
    request[REQUEST_ATTRIBUTES_KEY][policy.id_attribute] = [identifier.value]
    if policy.set_userid_attribute:
        request[REQUEST_USER_ID_KEY] = identifier.value


class OpaqueSmartIDFilter:
    """Processing filter generating opaque, globally unique user identifiers.

    Usage:
        smartid = OpaqueSmartIDFilter.from_config({"scope": "example.org"})
        smartid.process(request)

    Raises:
        NoUsableAttribute: From process(), if no candidate is usable.
    """

    def __init__(
        self,
        policy: SmartIDPolicy,
        metadata: MetadataLookup | None = None,
        sink: DiagnosticSink | None = None,
    ) -> None:
        self.policy = policy
        self._metadata = metadata
        self._deriver = IdentifierDeriver(policy, metadata=metadata, sink=sink)

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        salt_provider: SecretSaltProvider | None = None,
        metadata: MetadataLookup | None = None,
        sink: DiagnosticSink | None = None,
    ) -> "OpaqueSmartIDFilter":
        """Create a filter from raw configuration options.

        Raises:
            ConfigurationError: If the configuration is malformed.
        """
        policy = SmartIDPolicy.from_config(config, salt_provider=salt_provider)
        _system_logger.info(
            {
                "event": "filter_configured",
                "id_attribute": policy.id_attribute,
                "candidates": len(policy.candidates),
                "scoped": policy.scope is not None,
            }
        )
        return cls(policy, metadata=metadata, sink=sink)

    def process(self, request: MutableMapping[str, Any]) -> Identifier:
        """Derive the identifier and write it into the request.

        Args:
            request: Pipeline request state; must hold "Attributes".

        Returns:
            The identifier that was written.

        Raises:
            ValueError: If the request has no attribute bag.
            NoUsableAttribute: If no candidate attribute is usable.
        """
        attributes = request.get(REQUEST_ATTRIBUTES_KEY)
        if not isinstance(attributes, MutableMapping):
            raise ValueError(f"Request has no '{REQUEST_ATTRIBUTES_KEY}' mapping")

        context = build_request_context(request, self._metadata)
        result = self._deriver.derive(attributes, context)

        if isinstance(result, Failure):
            raise NoUsableAttribute(result, ErrorReport.from_failure(result))

        apply_identifier(request, result, self.policy)
        return result
