"""Exceptions for opaque-smartid.

Hierarchy:
    SmartIDError
    ├── ConfigurationError          - malformed policy/config (startup, fatal)
    ├── UnsupportedAttributeValue   - one candidate unusable (recoverable)
    └── NoUsableAttribute           - no candidate usable (fatal for the event)

Only ConfigurationError and NoUsableAttribute ever reach callers.
UnsupportedAttributeValue is raised by value extraction and handled inside
the candidate scan.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from opaque_smartid.deriver.result import ErrorReport, Failure

__all__ = [
    "ConfigurationError",
    "NoUsableAttribute",
    "SmartIDError",
    "UnsupportedAttributeValue",
]


class SmartIDError(Exception):
    """Base class for opaque-smartid errors."""


class ConfigurationError(SmartIDError, ValueError):
    """Policy or configuration file is malformed.

    Detected when the policy is constructed, never during derivation.
    """


class UnsupportedAttributeValue(SmartIDError):
    """A candidate value is neither a scalar nor a usable persistent NameID.

    Attributes:
        candidate: Name of the candidate attribute, when known.
    """

    def __init__(self, message: str, candidate: str | None = None) -> None:
        super().__init__(message)
        self.candidate = candidate


class NoUsableAttribute(SmartIDError):
    """No candidate attribute yielded a usable value.

    Raised by the processing filter so the hosting pipeline halts the
    authentication flow and renders the attached error report.

    Attributes:
        failure: The structured failure returned by the deriver.
        report: Error code and template parameters for the UI layer.
    """

    def __init__(self, failure: "Failure", report: "ErrorReport") -> None:
        super().__init__(
            f"No usable identifier attribute from {failure.source_display or 'unknown source'}; "
            f"tried: {', '.join(failure.candidates_tried) or '(none)'}"
        )
        self.failure = failure
        self.report = report
