"""Logging utilities for opaque-smartid."""

from opaque_smartid.utils.logging.logger_setup import ISO8601Formatter, setup_jsonl_logger

__all__ = ["ISO8601Formatter", "setup_jsonl_logger"]
