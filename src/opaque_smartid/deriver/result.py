"""Derivation results.

    DerivationResult
    ├── Identifier  - generated (hashed) or copied (pass-through) identifier
    └── Failure     - no candidate yielded a usable value

ErrorReport turns a Failure into the error code and template parameters
the UI layer renders to the end user.
"""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import Any, Literal, Union

from opaque_smartid.constants import NO_ATTRIBUTE_ERROR_CODE

__all__ = [
    "DerivationResult",
    "ErrorReport",
    "Failure",
    "Identifier",
]


@dataclass(frozen=True)
class Identifier:
    """Successfully derived identifier.

    Attributes:
        value: The identifier. For generated identifiers this is the
            64-char SHA-256 hex digest, optionally followed by "@scope".
            For pass-through identifiers it is the raw attribute value.
        candidate: Attribute the identifier was derived from.
        passthrough: True if copied verbatim instead of generated.
    """

    value: str
    candidate: str
    passthrough: bool = False

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Failure:
    """No usable attribute was found.

    Attributes:
        reason: Always "NoUsableAttribute".
        candidates_tried: Every candidate name of the scanned list, in order.
        source_display: Human-readable label of the source IdP.
        passthrough: True if the pass-through list was the one scanned.
    """

    candidates_tried: tuple[str, ...]
    source_display: str | None = None
    passthrough: bool = False
    reason: Literal["NoUsableAttribute"] = field(default="NoUsableAttribute")

    @property
    def diagnostic_context(self) -> dict[str, Any]:
        """Payload for display: attempted candidates and source label."""
        return {
            "candidates_tried": list(self.candidates_tried),
            "source_display": self.source_display,
        }


DerivationResult = Union[Identifier, Failure]


@dataclass(frozen=True)
class ErrorReport:
    """Error code and template parameters for the UI layer.

    Attributes:
        error_code: Template error code (NOATTRIBUTE).
        parameters: Template placeholders -> HTML-safe values.
    """

    error_code: str
    parameters: dict[str, str]

    @classmethod
    def from_failure(cls, failure: Failure) -> "ErrorReport":
        """Build the NOATTRIBUTE report: candidate list and IdP label."""
        items = "".join(f"<li>{html.escape(name)}</li>" for name in failure.candidates_tried)
        return cls(
            error_code=NO_ATTRIBUTE_ERROR_CODE,
            parameters={
                "%ATTRIBUTES%": f"<ul>{items}</ul>",
                "%IDP%": html.escape(failure.source_display or ""),
            },
        )
