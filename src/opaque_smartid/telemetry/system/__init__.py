"""System/operational logging."""

from opaque_smartid.telemetry.system.system_logger import SYSTEM_LOGGER_NAME, get_system_logger

__all__ = ["SYSTEM_LOGGER_NAME", "get_system_logger"]
