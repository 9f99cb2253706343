"""Canonical string construction and hashing.

Wire format (must stay bit-exact, identifiers are persisted by callers):

    canonical  = [candidate ":"] value ["!" authority]
    identifier = lowercase_hex(SHA-256(canonical "!" salt)) ["@" scope]

Strings are UTF-8 encoded before hashing.
"""

from __future__ import annotations

import hashlib

from opaque_smartid.constants import (
    AUTHORITY_SEPARATOR,
    CANDIDATE_SEPARATOR,
    SALT_SEPARATOR,
    SCOPE_SEPARATOR,
)

__all__ = [
    "build_canonical_string",
    "hash_canonical_string",
    "scope_identifier",
]


def build_canonical_string(
    value: str,
    candidate: str | None = None,
    authority: str | None = None,
) -> str:
    """Assemble the pre-hash string.

    Args:
        value: Extracted identifier value.
        candidate: Candidate attribute name to prepend, or None.
        authority: Authority to append, or None/empty.

    Returns:
        The canonical string.
    """
    canonical = f"{candidate}{CANDIDATE_SEPARATOR}{value}" if candidate else value
    if authority:
        canonical = f"{canonical}{AUTHORITY_SEPARATOR}{authority}"
    return canonical


def hash_canonical_string(canonical: str, salt: str) -> str:
    """SHA-256 of canonical + "!" + salt as 64 lowercase hex characters."""
    return hashlib.sha256(f"{canonical}{SALT_SEPARATOR}{salt}".encode("utf-8")).hexdigest()


def scope_identifier(hashed: str, scope: str | None) -> str:
    """Append "@scope" when a scope is configured."""
    if scope:
        return f"{hashed}{SCOPE_SEPARATOR}{scope}"
    return hashed
