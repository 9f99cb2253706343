"""Identifier deriver - policy evaluation and hashing.

The deriver is stateless and side-effect free apart from diagnostics.
Writing the identifier back into the request is done by the processing
filter in pep/.

Structure:
    result.py   - Identifier / Failure / ErrorReport
    gating.py   - tag gating, authority mapping, candidate selection
    hashing.py  - canonical string and SHA-256 identifier format
    engine.py   - IdentifierDeriver and derive()
"""

from opaque_smartid.deriver.engine import IdentifierDeriver, derive
from opaque_smartid.deriver.gating import (
    embedded_authority,
    map_authority,
    select_candidates,
    should_generate,
)
from opaque_smartid.deriver.hashing import (
    build_canonical_string,
    hash_canonical_string,
    scope_identifier,
)
from opaque_smartid.deriver.result import DerivationResult, ErrorReport, Failure, Identifier

__all__ = [
    # Engine
    "IdentifierDeriver",
    "derive",
    # Results
    "DerivationResult",
    "ErrorReport",
    "Failure",
    "Identifier",
    # Policy evaluation
    "embedded_authority",
    "map_authority",
    "select_candidates",
    "should_generate",
    # Hashing
    "build_canonical_string",
    "hash_canonical_string",
    "scope_identifier",
]
