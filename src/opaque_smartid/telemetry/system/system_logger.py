"""System logger for operational messages (config loading, CLI)."""

import logging

SYSTEM_LOGGER_NAME = "opaque-smartid.system"


def get_system_logger() -> logging.Logger:
    """Return the shared system logger."""
    return logging.getLogger(SYSTEM_LOGGER_NAME)
