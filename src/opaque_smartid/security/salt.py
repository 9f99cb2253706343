"""Secret salt providers.

The salt is mixed into every generated identifier. It must stay identical
for the lifetime of a deployment: changing it re-keys every identifier
ever issued. It is never logged.

Providers:
- StaticSaltProvider: salt passed in directly (tests, embedding apps)
- EnvironmentSaltProvider: salt read from OPAQUE_SMARTID_SECRET_SALT
"""

from __future__ import annotations

import os
from typing import Protocol, runtime_checkable

from pydantic import SecretStr

from opaque_smartid.constants import SECRET_SALT_ENV_VAR
from opaque_smartid.exceptions import ConfigurationError

__all__ = [
    "EnvironmentSaltProvider",
    "SecretSaltProvider",
    "StaticSaltProvider",
]


@runtime_checkable
class SecretSaltProvider(Protocol):
    """Protocol for supplying the deployment-wide secret salt."""

    def get_secret_salt(self) -> SecretStr:
        """Return the secret salt.

        Raises:
            ConfigurationError: If no usable salt is available.
        """
        ...


class StaticSaltProvider:
    """Salt supplied at construction time."""

    def __init__(self, salt: str | SecretStr) -> None:
        self._salt = salt if isinstance(salt, SecretStr) else SecretStr(salt)

    def get_secret_salt(self) -> SecretStr:
        if not self._salt.get_secret_value():
            raise ConfigurationError("secret_salt must not be empty")
        return self._salt


class EnvironmentSaltProvider:
    """Salt read from an environment variable on each call.

    Args:
        env_var: Variable name (default: OPAQUE_SMARTID_SECRET_SALT).
    """

    def __init__(self, env_var: str = SECRET_SALT_ENV_VAR) -> None:
        self._env_var = env_var

    def get_secret_salt(self) -> SecretStr:
        value = os.environ.get(self._env_var, "")
        if not value:
            raise ConfigurationError(
                f"No secret salt configured. Set 'secret_salt' in the configuration "
                f"or the {self._env_var} environment variable."
            )
        return SecretStr(value)
