"""Identifier deriver - turn an attribute bag into an opaque identifier.

Derivation flow:
1. Tag gating → pass-through path if the IdP is excluded
2. Authority normalization (authority_map) for matching
3. Candidate list selection (authority_candidate_map or candidates)
4. First usable candidate → canonical string → salted SHA-256 → "@scope"
5. Pass-through path: first usable cuid candidate copied verbatim
6. Nothing usable → Failure

Design principles:
1. Pure and synchronous: no I/O, inputs are never mutated
2. Earlier candidates take strict priority over later ones
3. One malformed candidate never aborts the scan
4. Diagnostics go to an injectable sink; the salt and raw values never do
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from opaque_smartid.config import SmartIDPolicy
from opaque_smartid.context.parsing import extract_identifier_value, first_value
from opaque_smartid.context.request import RequestContext
from opaque_smartid.deriver.gating import (
    embedded_authority,
    map_authority,
    select_candidates,
    should_generate,
)
from opaque_smartid.deriver.hashing import (
    build_canonical_string,
    hash_canonical_string,
    scope_identifier,
)
from opaque_smartid.deriver.result import DerivationResult, Failure, Identifier
from opaque_smartid.exceptions import UnsupportedAttributeValue
from opaque_smartid.pips.metadata import MetadataLookup, resolve_display_label
from opaque_smartid.telemetry.sink import DiagnosticSink, LoggingDiagnosticSink

__all__ = [
    "IdentifierDeriver",
    "derive",
]


class IdentifierDeriver:
    """Derives opaque user identifiers under a fixed policy.

    Safe to share across concurrent authentication events: the policy is
    immutable and no per-call state is stored on the instance.

    Attributes:
        policy: The derivation policy.
    """

    def __init__(
        self,
        policy: SmartIDPolicy,
        metadata: MetadataLookup | None = None,
        sink: DiagnosticSink | None = None,
    ) -> None:
        """Initialize the deriver.

        Args:
            policy: Validated derivation policy (carries the secret salt).
            metadata: Display lookup used only for failure reports.
            sink: Diagnostic sink (default: LoggingDiagnosticSink).
        """
        self.policy = policy
        self._metadata = metadata
        self._sink = sink or LoggingDiagnosticSink()

    def derive(self, bag: Mapping[str, Any], context: RequestContext) -> DerivationResult:
        """Derive an identifier for one authentication event.

        Args:
            bag: Attribute name -> ordered values. Not modified.
            context: Authority chain, IdP tags and source entity.

        Returns:
            Identifier on success, Failure if no candidate was usable.
        """
        authority = context.effective_authority
        mapped = map_authority(self.policy, authority)
        if mapped != authority:
            self._sink.notice("authority_mapped", {"authority": authority, "mapped_authority": mapped})

        if not should_generate(self.policy, context.idp_tags):
            self._sink.notice(
                "tag_gating_skipped",
                {"authority": authority, "idp_tags": context.idp_tags or frozenset()},
            )
            return self._copy(bag, context)

        candidates = select_candidates(self.policy, mapped)
        self._sink.notice(
            "candidate_list_selected",
            {
                "authority": authority,
                "candidates_tried": candidates,
                "overridden": mapped in self.policy.authority_candidate_map,
            },
        )

        found = self._first_usable(bag, candidates)
        if found is None:
            return self._fail(candidates, context, passthrough=False)

        name, value = found
        authority_part = embedded_authority(self.policy, authority, mapped)
        canonical = build_canonical_string(
            value,
            candidate=name if self.policy.add_candidate else None,
            authority=authority_part,
        )
        hashed = hash_canonical_string(canonical, self.policy.secret_salt.get_secret_value())
        identifier = scope_identifier(hashed, self.policy.scope)

        self._sink.notice(
            "identifier_generated",
            {"candidate": name, "authority": authority_part, "scoped": self.policy.scope is not None},
        )
        return Identifier(value=identifier, candidate=name)

    def _copy(self, bag: Mapping[str, Any], context: RequestContext) -> DerivationResult:
        """Pass-through path: copy an already-opaque identifier verbatim."""
        candidates = self.policy.cuid_candidates
        found = self._first_usable(bag, candidates)
        if found is None:
            return self._fail(candidates, context, passthrough=True)

        name, value = found
        self._sink.notice("identifier_copied", {"candidate": name})
        return Identifier(value=value, candidate=name, passthrough=True)

    def _first_usable(self, bag: Mapping[str, Any], candidates: Sequence[str]) -> tuple[str, str] | None:
        """Return (name, value) of the first candidate with a usable value.

        Candidates whose value cannot be extracted are reported and skipped.
        """
        for name in candidates:
            raw = first_value(bag, name)
            if raw is None:
                continue
            try:
                return name, extract_identifier_value(raw)
            except UnsupportedAttributeValue as e:
                self._sink.notice(
                    "candidate_unsupported",
                    {
                        "candidate": name,
                        "error_type": type(e).__name__,
                        "error_message": str(e),
                    },
                )
        return None

    def _fail(self, candidates: Sequence[str], context: RequestContext, passthrough: bool) -> Failure:
        failure = Failure(
            candidates_tried=tuple(candidates),
            source_display=resolve_display_label(context.display_entity_id, self._metadata),
            passthrough=passthrough,
        )
        self._sink.notice(
            "no_usable_attribute",
            {
                "candidates_tried": failure.candidates_tried,
                "source": failure.source_display,
                "passthrough": passthrough,
            },
        )
        return failure


def derive(
    bag: Mapping[str, Any],
    context: RequestContext,
    policy: SmartIDPolicy,
    *,
    metadata: MetadataLookup | None = None,
    sink: DiagnosticSink | None = None,
) -> DerivationResult:
    """Derive an identifier (functional form of IdentifierDeriver.derive).

    Args:
        bag: Attribute name -> ordered values.
        context: Request context.
        policy: Derivation policy.
        metadata: Display lookup for failure reports.
        sink: Diagnostic sink.

    Returns:
        Identifier or Failure.
    """
    return IdentifierDeriver(policy, metadata=metadata, sink=sink).derive(bag, context)
