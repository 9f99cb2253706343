"""Logger setup for JSON-lines diagnostics.

Log records whose message is a dict are serialized as one JSON object per
line, with an ISO 8601 `time` field added at format time. Plain string
messages are wrapped as {"message": ...}.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

__all__ = [
    "ISO8601Formatter",
    "setup_jsonl_logger",
]


class ISO8601Formatter(logging.Formatter):
    """Format records as JSON lines with a leading ISO 8601 timestamp."""

    def format(self, record: logging.LogRecord) -> str:
        payload = record.msg if isinstance(record.msg, dict) else {"message": record.getMessage()}
        time = datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec="milliseconds")
        return json.dumps({"time": time, **payload}, default=str)


def setup_jsonl_logger(
    name: str,
    log_path: Path,
    log_level: int = logging.INFO,
) -> logging.Logger:
    """Attach a JSONL file handler to a named logger.

    Idempotent: an existing handler for the same file is reused.
    Creates the parent directory with owner-only permissions.

    Args:
        name: Logger name.
        log_path: Destination .jsonl file.
        log_level: Minimum level written.

    Returns:
        The configured logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    resolved = str(log_path.resolve())
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == resolved:
            return logger

    log_path.parent.mkdir(parents=True, exist_ok=True)
    log_path.parent.chmod(0o700)

    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(ISO8601Formatter())
    logger.addHandler(handler)
    return logger
