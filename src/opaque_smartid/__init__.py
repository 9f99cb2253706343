"""opaque-smartid: opaque, non-reassignable, globally unique user identifiers.

Derives a stable identifier from the attributes released by an identity
provider:

    SHA-256(CandidateName:Value!AuthenticatingAuthority!SecretSalt)[@scope]

Example usage:
    from opaque_smartid import RequestContext, SmartIDPolicy, derive

    policy = SmartIDPolicy.from_config({"scope": "example.org", "secret_salt": salt})
    result = derive(
        {"eduPersonPrincipalName": ["alice@example.org"]},
        RequestContext(authenticating_authorities=("https://idp.example",)),
        policy,
    )
"""

from opaque_smartid.config import AppConfig, LoggingConfig, SmartIDPolicy
from opaque_smartid.context import NameIDValue, RequestContext, ScalarValue
from opaque_smartid.deriver import (
    DerivationResult,
    ErrorReport,
    Failure,
    Identifier,
    IdentifierDeriver,
    derive,
)
from opaque_smartid.exceptions import (
    ConfigurationError,
    NoUsableAttribute,
    SmartIDError,
    UnsupportedAttributeValue,
)
from opaque_smartid.pep import OpaqueSmartIDFilter

__version__ = "0.3.0"

__all__ = [
    "__version__",
    # Configuration
    "AppConfig",
    "LoggingConfig",
    "SmartIDPolicy",
    # Inputs
    "NameIDValue",
    "RequestContext",
    "ScalarValue",
    # Derivation
    "DerivationResult",
    "ErrorReport",
    "Failure",
    "Identifier",
    "IdentifierDeriver",
    "derive",
    "OpaqueSmartIDFilter",
    # Exceptions
    "ConfigurationError",
    "NoUsableAttribute",
    "SmartIDError",
    "UnsupportedAttributeValue",
]
