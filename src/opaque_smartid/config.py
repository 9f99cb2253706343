"""Configuration for opaque-smartid.

Defines the derivation policy and the application configuration wrapping it.
The policy is validated once at startup and is immutable afterwards; it can
be shared by any number of concurrent derivations.

Recognized policy options (JSON keys):
    candidates               Ordered attribute names used for generation
    authority_candidate_map  Authority -> ordered attribute names (override)
    cuid_candidates          Ordered attribute names copied on pass-through
    id_attribute             Name of the output attribute (default: smart_id)
    add_authority            Append the authenticating authority (default: true)
    add_candidate            Prepend the candidate name (default: true)
    scope                    Suffix appended as "@scope" (default: none)
    set_userid_attribute     Also set the request's UserID (default: true)
    skip_authority_list      Authorities (after authority_map) never embedded
    idp_tag_whitelist        Generate only for IdPs carrying one of these tags
    idp_tag_blacklist        Never generate for IdPs carrying one of these tags
    authority_map            New authority -> legacy authority for matching
    secret_salt              Deployment-wide secret mixed into every hash

Example usage:
    policy = SmartIDPolicy.from_config({"scope": "example.org", "secret_salt": "..."})

    config = AppConfig.load_from_file(config_path)
    config.save_to_file(config_path)
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr, StringConstraints, field_validator

from opaque_smartid.constants import (
    DEFAULT_CANDIDATES,
    DEFAULT_CUID_CANDIDATES,
    DEFAULT_ID_ATTRIBUTE,
)
from opaque_smartid.exceptions import ConfigurationError
from opaque_smartid.pips.metadata import EntityMetadata
from opaque_smartid.security.salt import EnvironmentSaltProvider, SecretSaltProvider
from opaque_smartid.utils.file_helpers import (
    read_json_file,
    require_file_exists,
    validate_model,
    write_json_atomic,
)

__all__ = [
    "AppConfig",
    "LoggingConfig",
    "SmartIDPolicy",
]

# Non-empty string, no coercion from other types
NonEmptyStr = Annotated[str, StringConstraints(strict=True, min_length=1)]


# =============================================================================
# Derivation Policy
# =============================================================================


class SmartIDPolicy(BaseModel):
    """Immutable identifier derivation policy.

    Booleans and strings are strict: a string "true" is rejected rather than
    coerced, so a malformed option fails at startup instead of silently
    changing every identifier.

    Attributes:
        candidates: Ordered attribute names considered for generation.
            May be empty, which makes generation always fail.
        authority_candidate_map: Per-authority candidate list overriding
            `candidates` when the (mapped) authority matches.
        cuid_candidates: Ordered attribute names copied verbatim when
            generation is skipped by tag gating.
        id_attribute: Output attribute name.
        add_authority: Embed the authenticating authority in the hash input.
        add_candidate: Embed the candidate attribute name in the hash input.
        scope: Optional scope appended to generated identifiers.
        set_userid_attribute: Also write the identifier to the UserID field.
        skip_authority_list: Authorities never embedded in the hash input,
            matched after authority_map.
        idp_tag_whitelist: If non-empty, generate only for IdPs with a
            matching tag.
        idp_tag_blacklist: If non-empty, skip generation for IdPs with a
            matching tag.
        authority_map: New -> legacy authority, applied before matching.
        secret_salt: Deployment-wide secret salt.
    """

    candidates: tuple[NonEmptyStr, ...] = DEFAULT_CANDIDATES
    authority_candidate_map: dict[NonEmptyStr, tuple[NonEmptyStr, ...]] = Field(default_factory=dict)
    cuid_candidates: tuple[NonEmptyStr, ...] = DEFAULT_CUID_CANDIDATES
    id_attribute: NonEmptyStr = DEFAULT_ID_ATTRIBUTE
    add_authority: bool = Field(default=True, strict=True)
    add_candidate: bool = Field(default=True, strict=True)
    scope: NonEmptyStr | None = None
    set_userid_attribute: bool = Field(default=True, strict=True)
    skip_authority_list: frozenset[NonEmptyStr] = Field(default_factory=frozenset)
    idp_tag_whitelist: frozenset[NonEmptyStr] = Field(default_factory=frozenset)
    idp_tag_blacklist: frozenset[NonEmptyStr] = Field(default_factory=frozenset)
    authority_map: dict[NonEmptyStr, NonEmptyStr] = Field(default_factory=dict)
    secret_salt: SecretStr

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("secret_salt")
    @classmethod
    def salt_not_empty(cls, value: SecretStr) -> SecretStr:
        """An empty salt would make identifiers reversible by dictionary attack."""
        if not value.get_secret_value():
            raise ValueError("secret_salt must not be empty")
        return value

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        salt_provider: SecretSaltProvider | None = None,
        source: str = "policy configuration",
    ) -> "SmartIDPolicy":
        """Build a policy from a raw configuration mapping.

        If the mapping has no `secret_salt`, the salt provider is asked
        (default: EnvironmentSaltProvider).

        Args:
            config: Raw options, keys as listed in the module docstring.
            salt_provider: Fallback source of the secret salt.
            source: Origin of the mapping, used in error messages.

        Returns:
            Validated SmartIDPolicy.

        Raises:
            ConfigurationError: If an option has the wrong type or shape,
                or no salt is available.
        """
        if not isinstance(config, Mapping):
            raise ConfigurationError(f"Invalid {source}: expected a mapping, got {type(config).__name__}")

        data = dict(config)
        if not data.get("secret_salt"):
            provider = salt_provider or EnvironmentSaltProvider()
            data["secret_salt"] = provider.get_secret_salt()

        return validate_model(cls, data, source)

    def to_config(self, include_secret_salt: bool = False) -> dict[str, Any]:
        """Dump as a JSON-compatible mapping accepted by `from_config`.

        The salt is omitted unless explicitly requested.
        """
        data = self.model_dump(mode="json", exclude={"secret_salt"})
        # frozensets dump as lists in arbitrary order; keep files diffable
        for key in ("skip_authority_list", "idp_tag_whitelist", "idp_tag_blacklist"):
            data[key] = sorted(data[key])
        if include_secret_salt:
            data["secret_salt"] = self.secret_salt.get_secret_value()
        return data


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging configuration settings.

    When log_dir is set, derivation diagnostics are written to
    <log_dir>/opaque_smartid_logs/derivation.jsonl in addition to the
    standard logging hierarchy.

    Attributes:
        log_dir: Base directory for JSONL logs (None: no file logging).
        log_level: Minimum level for derivation diagnostics.
    """

    log_dir: str | None = None
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# Application Configuration
# =============================================================================


class AppConfig(BaseModel):
    """Main application configuration for opaque-smartid.

    Attributes:
        policy: Derivation policy.
        logging: Logging configuration.
        metadata: Static entity metadata (display names, IdP tags) keyed
            by entity ID.
    """

    policy: SmartIDPolicy
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    metadata: dict[str, EntityMetadata] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

    def save_to_file(self, config_path: Path, include_secret_salt: bool = False) -> None:
        """Save configuration to a JSON file.

        Creates parent directories with 0o700 and the file with 0o600.
        The secret salt is written only when explicitly requested; otherwise
        it must be supplied through the environment at load time.

        Args:
            config_path: Destination path.
            include_secret_salt: Persist the salt in the file.
        """
        data = {
            "policy": self.policy.to_config(include_secret_salt=include_secret_salt),
            "logging": self.logging.model_dump(mode="json"),
            "metadata": {
                entity_id: {"name": meta.name, "tags": sorted(meta.tags)}
                for entity_id, meta in self.metadata.items()
            },
        }
        write_json_atomic(config_path, data)

    @classmethod
    def load_from_file(
        cls,
        config_path: Path,
        salt_provider: SecretSaltProvider | None = None,
    ) -> "AppConfig":
        """Load configuration from a JSON file.

        Args:
            config_path: Path to the config file.
            salt_provider: Salt source used when the file has no secret_salt
                (default: EnvironmentSaltProvider).

        Returns:
            AppConfig instance.

        Raises:
            FileNotFoundError: If the config file doesn't exist.
            ConfigurationError: If the file is invalid or no salt is available.
        """
        require_file_exists(config_path, file_type="configuration")
        data = read_json_file(config_path)
        if not isinstance(data, dict):
            raise ConfigurationError(f"Invalid configuration in {config_path}: expected a JSON object")

        policy = SmartIDPolicy.from_config(
            data.get("policy", {}),
            salt_provider=salt_provider,
            source=str(config_path),
        )
        return validate_model(cls, {**data, "policy": policy}, str(config_path))
