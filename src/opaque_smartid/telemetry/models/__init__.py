"""Pydantic models for log entries."""

from opaque_smartid.telemetry.models.derivation import DerivationEvent

__all__ = ["DerivationEvent"]
