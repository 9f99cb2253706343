"""Command-line interface for opaque-smartid.

Provides commands for deriving identifiers and managing configuration.
"""

from .main import cli, main

__all__ = ["cli", "main"]
