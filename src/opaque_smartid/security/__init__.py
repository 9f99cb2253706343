"""Security primitives for opaque-smartid.

This module provides:
- Secret salt providers (static, environment)

Note: Exceptions are defined in opaque_smartid.exceptions
"""

from opaque_smartid.security.salt import (
    EnvironmentSaltProvider,
    SecretSaltProvider,
    StaticSaltProvider,
)

__all__ = [
    "EnvironmentSaltProvider",
    "SecretSaltProvider",
    "StaticSaltProvider",
]
