"""Validation utilities for opaque identifiers.

Helpers for callers that store or compare generated identifiers.
"""

from __future__ import annotations

from opaque_smartid.constants import SCOPE_SEPARATOR

__all__ = [
    "SHA256_HEX_LENGTH",
    "is_opaque_identifier",
    "split_scoped_identifier",
    "validate_sha256_hex",
]

# SHA-256 hash is 256 bits = 32 bytes = 64 hex characters
SHA256_HEX_LENGTH: int = 64

# Valid hexadecimal characters (lowercase)
_SHA256_VALID_CHARS: frozenset[str] = frozenset("0123456789abcdef")


def validate_sha256_hex(value: str) -> tuple[bool, str | None]:
    """Validate a SHA-256 hash hex string.

    Args:
        value: The hex string to validate.

    Returns:
        Tuple of (is_valid, normalized_value).
        - If valid: (True, lowercase_normalized_hash)
        - If invalid: (False, None)
    """
    if not value:
        return False, None

    normalized = value.strip().lower()

    if len(normalized) != SHA256_HEX_LENGTH:
        return False, None

    if not all(c in _SHA256_VALID_CHARS for c in normalized):
        return False, None

    return True, normalized


def split_scoped_identifier(identifier: str) -> tuple[str, str | None]:
    """Split "<hash>@<scope>" into (hash, scope).

    Splits on the first "@" since the hash part never contains one.

    Example:
        >>> split_scoped_identifier("ab12...@example.org")
        ("ab12...", "example.org")
    """
    hashed, sep, scope = identifier.partition(SCOPE_SEPARATOR)
    return hashed, (scope if sep else None)


def is_opaque_identifier(identifier: str, scope: str | None = None) -> bool:
    """Check that an identifier has the generated format.

    The hash part must be exactly 64 lowercase hex characters. No
    normalization is applied: uppercase digests are rejected.

    Args:
        identifier: Identifier to check.
        scope: Expected scope; if given, the identifier must carry it.

    Returns:
        True if the identifier matches the generated format.
    """
    hashed, found_scope = split_scoped_identifier(identifier)
    if len(hashed) != SHA256_HEX_LENGTH or not all(c in _SHA256_VALID_CHARS for c in hashed):
        return False
    if scope is not None:
        return found_scope == scope
    return True
