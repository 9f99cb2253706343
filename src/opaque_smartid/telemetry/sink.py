"""Diagnostic sinks for identifier derivation.

The deriver reports its decisions through a DiagnosticSink instead of a
hardwired logger, so tests can assert on emitted events and embedding
applications can route them anywhere.

Sinks:
- LoggingDiagnosticSink: validates events and logs them (stdlib logging)
- NullDiagnosticSink: discards everything
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol, get_args, runtime_checkable

from opaque_smartid.telemetry.models.derivation import DerivationEvent
from opaque_smartid.utils.logging.logger_setup import setup_jsonl_logger

__all__ = [
    "DERIVATION_LOGGER_NAME",
    "DiagnosticSink",
    "EVENT_LEVELS",
    "KNOWN_EVENTS",
    "LoggingDiagnosticSink",
    "NullDiagnosticSink",
    "create_derivation_sink",
]

DERIVATION_LOGGER_NAME = "opaque-smartid.derivation"

# Log level per event; unlisted events are DEBUG
EVENT_LEVELS: dict[str, str] = {
    "candidate_unsupported": "WARNING",
    "no_usable_attribute": "ERROR",
    "identifier_generated": "INFO",
    "identifier_copied": "INFO",
}

# Event names DerivationEvent accepts; others are logged as "diagnostic"
KNOWN_EVENTS: frozenset[str] = frozenset(get_args(DerivationEvent.model_fields["event"].annotation))


@runtime_checkable
class DiagnosticSink(Protocol):
    """Receiver of derivation diagnostics."""

    def notice(self, event: str, fields: Mapping[str, Any]) -> None:
        """Record one diagnostic event.

        Args:
            event: Machine-friendly event name.
            fields: Structured event fields.
        """
        ...


class NullDiagnosticSink:
    """Sink that drops every event."""

    def notice(self, event: str, fields: Mapping[str, Any]) -> None:
        return None


class LoggingDiagnosticSink:
    """Sink writing DerivationEvent entries to a stdlib logger.

    Fields are validated against DerivationEvent. Unknown fields are
    folded into `details`, and an unknown event name is logged as a
    "diagnostic" event with the original name in `details["name"]`, so a
    new diagnostic never breaks an authentication event.

    Args:
        logger: Target logger (default: opaque-smartid.derivation).
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(DERIVATION_LOGGER_NAME)

    def notice(self, event: str, fields: Mapping[str, Any]) -> None:
        level_name = EVENT_LEVELS.get(event, "DEBUG")
        level = logging.getLevelName(level_name)
        if not self._logger.isEnabledFor(level):
            return

        known = set(DerivationEvent.model_fields) - {"time", "event", "level"}
        data = {k: v for k, v in fields.items() if k in known}
        extra = {k: v for k, v in fields.items() if k not in known}
        if event not in KNOWN_EVENTS:
            extra["name"] = event
            event = "diagnostic"
        if extra:
            data["details"] = {**(data.get("details") or {}), **extra}
        if isinstance(data.get("candidates_tried"), tuple):
            data["candidates_tried"] = list(data["candidates_tried"])
        if data.get("idp_tags") is not None:
            data["idp_tags"] = sorted(data["idp_tags"])

        record = DerivationEvent(event=event, level=level_name, **data)
        self._logger.log(level, record.model_dump(mode="json", exclude={"time"}, exclude_none=True))


def create_derivation_sink(
    log_dir: Path | None = None,
    log_level: str = "INFO",
) -> LoggingDiagnosticSink:
    """Create a logging sink, optionally also writing JSONL to disk.

    Args:
        log_dir: Base log directory. If set, events are appended to
            <log_dir>/opaque_smartid_logs/derivation.jsonl.
        log_level: Minimum level name.

    Returns:
        Configured LoggingDiagnosticSink.
    """
    level = logging.getLevelName(log_level)
    if log_dir is None:
        logger = logging.getLogger(DERIVATION_LOGGER_NAME)
        logger.setLevel(level)
    else:
        logger = setup_jsonl_logger(
            DERIVATION_LOGGER_NAME,
            Path(log_dir) / "opaque_smartid_logs" / "derivation.jsonl",
            log_level=level,
        )
    return LoggingDiagnosticSink(logger)
