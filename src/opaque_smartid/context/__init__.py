"""Derivation inputs: attribute values and request context.

- attributes.py: AttributeValue tagged union and AttributeBag
- request.py: RequestContext (authority chain, IdP tags, source entity)
- parsing.py: raw value coercion, NameID XML adapter, value extraction
"""

from opaque_smartid.context.attributes import (
    AttributeBag,
    AttributeValue,
    NameIDValue,
    ScalarValue,
    UnsupportedValue,
)
from opaque_smartid.context.parsing import (
    coerce_attribute_value,
    extract_identifier_value,
    first_value,
    parse_name_id_xml,
)
from opaque_smartid.context.request import RequestContext

__all__ = [
    # Values
    "AttributeBag",
    "AttributeValue",
    "NameIDValue",
    "ScalarValue",
    "UnsupportedValue",
    # Parsing
    "coerce_attribute_value",
    "extract_identifier_value",
    "first_value",
    "parse_name_id_xml",
    # Context
    "RequestContext",
]
