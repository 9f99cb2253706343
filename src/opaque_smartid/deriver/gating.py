"""Policy evaluation helpers for identifier derivation.

Pure functions over SmartIDPolicy; no I/O, no logging.

Evaluation order:
1. Tag gating (whitelist, then blacklist) decides generate vs pass-through
2. authority_map normalizes the authority for matching
3. authority_candidate_map overrides the candidate list
4. skip_authority_list suppresses the authority in the canonical string
"""

from __future__ import annotations

from collections.abc import Iterable

from opaque_smartid.config import SmartIDPolicy

__all__ = [
    "embedded_authority",
    "map_authority",
    "select_candidates",
    "should_generate",
]


def should_generate(policy: SmartIDPolicy, tags: Iterable[str] | None) -> bool:
    """Decide whether identifiers are generated for an IdP with these tags.

    A tag present in both lists is rejected: the blacklist is checked after
    the whitelist admitted the IdP.

    Args:
        policy: Derivation policy.
        tags: IdP classification tags (None treated as no tags).

    Returns:
        True to generate, False to take the pass-through path.
    """
    tag_set = frozenset(tags or ())

    if policy.idp_tag_whitelist and policy.idp_tag_whitelist.isdisjoint(tag_set):
        return False

    if policy.idp_tag_blacklist and not policy.idp_tag_blacklist.isdisjoint(tag_set):
        return False

    return True


def map_authority(policy: SmartIDPolicy, authority: str | None) -> str | None:
    """Translate a new authority identifier to its legacy form, if mapped."""
    if authority is None:
        return None
    return policy.authority_map.get(authority, authority)


def select_candidates(policy: SmartIDPolicy, mapped_authority: str | None) -> tuple[str, ...]:
    """Candidate list for the (mapped) authority, else the default list."""
    if mapped_authority is not None and mapped_authority in policy.authority_candidate_map:
        return policy.authority_candidate_map[mapped_authority]
    return policy.candidates


def embedded_authority(
    policy: SmartIDPolicy,
    authority: str | None,
    mapped_authority: str | None,
) -> str | None:
    """Authority to embed in the canonical string, or None.

    The unmapped authority is embedded. It is suppressed when add_authority
    is off or when its mapped form is in the skip list.
    """
    if not policy.add_authority or not authority:
        return None
    if mapped_authority is not None and mapped_authority in policy.skip_authority_list:
        return None
    return authority
