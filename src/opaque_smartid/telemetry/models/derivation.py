from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class DerivationEvent(BaseModel):
    """
    One identifier derivation diagnostic entry (derivation.jsonl).

    Records the decisions taken while deriving an identifier:
    - tag gating and authority mapping
    - candidate selection and skipped candidates
    - generated / copied identifiers and exhaustion

    Raw attribute values and the secret salt are never recorded.
    """

    # --- core ---
    time: Optional[str] = Field(
        None,
        description="ISO 8601 timestamp, added by formatter during serialization",
    )
    event: Literal[
        "tag_gating_skipped",
        "authority_mapped",
        "candidate_list_selected",
        "candidate_unsupported",
        "identifier_generated",
        "identifier_copied",
        "no_usable_attribute",
        "diagnostic",
    ]
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "DEBUG"
    message: Optional[str] = None  # human-readable description

    # --- derivation context ---
    candidate: Optional[str] = None  # attribute name that was used/skipped
    authority: Optional[str] = None  # effective authority (unmapped)
    mapped_authority: Optional[str] = None  # legacy authority after authority_map
    candidates_tried: Optional[List[str]] = None  # scanned list, in order
    idp_tags: Optional[List[str]] = None  # tags considered by gating
    source: Optional[str] = None  # display label of the source IdP

    # --- errors ---
    error_type: Optional[str] = None  # e.g. "UnsupportedAttributeValue"
    error_message: Optional[str] = None

    # --- extra details ---
    details: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="forbid")
