"""Telemetry for opaque-smartid: diagnostic sinks and log models."""

from opaque_smartid.telemetry.models import DerivationEvent
from opaque_smartid.telemetry.sink import (
    DiagnosticSink,
    LoggingDiagnosticSink,
    NullDiagnosticSink,
    create_derivation_sink,
)

__all__ = [
    "DerivationEvent",
    "DiagnosticSink",
    "LoggingDiagnosticSink",
    "NullDiagnosticSink",
    "create_derivation_sink",
]
