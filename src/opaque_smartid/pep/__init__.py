"""Policy Enforcement Point - integration with the authentication pipeline."""

from opaque_smartid.pep.filter import OpaqueSmartIDFilter, apply_identifier, build_request_context

__all__ = [
    "OpaqueSmartIDFilter",
    "apply_identifier",
    "build_request_context",
]
