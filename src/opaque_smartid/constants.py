"""Application-wide constants for opaque-smartid.

Constants that define derivation behavior and identifier wire format.
For per-deployment settings, see config.py.
"""

import os

from platformdirs import user_config_dir

# ============================================================================
# Configuration Location
# ============================================================================

# OS-specific config directory holding opaque_smartid_config.json.
#
# Platform-specific paths:
# - macOS: ~/Library/Application Support/opaque-smartid/
# - Linux: ~/.config/opaque-smartid/
# - Windows: %APPDATA%\opaque-smartid\
APP_NAME: str = "opaque-smartid"
CONFIG_DIR: str = os.path.realpath(user_config_dir(APP_NAME))
CONFIG_FILENAME: str = "opaque_smartid_config.json"

# Environment variable consulted by EnvironmentSaltProvider
SECRET_SALT_ENV_VAR: str = "OPAQUE_SMARTID_SECRET_SALT"

# ============================================================================
# Policy Defaults
# ============================================================================

# Attributes considered, in priority order, as the source of the identifier
DEFAULT_CANDIDATES: tuple[str, ...] = (
    "eduPersonUniqueId",
    "eduPersonPrincipalName",
    "eduPersonTargetedID",
    "openid",
    "linkedin_targetedID",
    "facebook_targetedID",
    "windowslive_targetedID",
    "twitter_targetedID",
)

# Already-opaque identifiers copied verbatim when generation is skipped
DEFAULT_CUID_CANDIDATES: tuple[str, ...] = (
    "voPersonID",
    "subject-id",
    "eduPersonUniqueId",
)

# Name of the attribute the identifier is written to
DEFAULT_ID_ATTRIBUTE: str = "smart_id"

# ============================================================================
# Identifier Wire Format
# ============================================================================

# Separators of the canonical pre-hash string:
#   [candidate ":"] value ["!" authority] "!" salt
CANDIDATE_SEPARATOR: str = ":"
AUTHORITY_SEPARATOR: str = "!"
SALT_SEPARATOR: str = "!"

# Separator between the hash and the optional scope: <sha256-hex>@<scope>
SCOPE_SEPARATOR: str = "@"

# ============================================================================
# SAML Name Identifiers
# ============================================================================

NAMEID_PERSISTENT: str = "urn:oasis:names:tc:SAML:2.0:nameid-format:persistent"
SAML_ASSERTION_NS: str = "urn:oasis:names:tc:SAML:2.0:assertion"

# ============================================================================
# Request Keys (processing filter integration)
# ============================================================================

REQUEST_ATTRIBUTES_KEY: str = "Attributes"
REQUEST_AUTHORITIES_KEY: str = "saml:AuthenticatingAuthority"
REQUEST_PROXIED_IDP_KEY: str = "saml:sp:IdP"
REQUEST_SOURCE_KEY: str = "Source"
REQUEST_USER_ID_KEY: str = "UserID"

# Error code rendered by the UI layer when no candidate is usable
NO_ATTRIBUTE_ERROR_CODE: str = "NOATTRIBUTE"
