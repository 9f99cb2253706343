"""Attribute value parsing and extraction.

Converts raw upstream attribute values into AttributeValue variants and
extracts the scalar identifier value the deriver hashes or copies.

Accepted raw shapes:
- str / int: used directly
- mapping with "Format"/"Value" keys (or lowercase): one NameID node
- xml.etree Element for a <saml:NameID>: one NameID node
- list/tuple of NameID nodes: usable only when it holds exactly one
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Mapping
from typing import Any

from opaque_smartid.constants import NAMEID_PERSISTENT, SAML_ASSERTION_NS
from opaque_smartid.context.attributes import (
    AttributeValue,
    NameIDValue,
    ScalarValue,
    UnsupportedValue,
)
from opaque_smartid.exceptions import UnsupportedAttributeValue

__all__ = [
    "coerce_attribute_value",
    "extract_identifier_value",
    "first_value",
    "parse_name_id_xml",
]

_NAMEID_TAG = f"{{{SAML_ASSERTION_NS}}}NameID"


def first_value(bag: Mapping[str, Any], name: str) -> Any | None:
    """Return the first value of an attribute, or None if absent or empty.

    Empty strings, None and empty containers count as absent. The string "0"
    and the integer 0 are usable values.

    Args:
        bag: Attribute bag.
        name: Attribute name.

    Returns:
        The first raw value, or None.
    """
    values = bag.get(name)
    if not values:
        return None
    if isinstance(values, (str, bytes)):
        # Single value not wrapped in a list
        values = [values]
    value = values[0]
    if value is None:
        return None
    if isinstance(value, (str, bytes, list, tuple, dict)) and len(value) == 0:
        return None
    return value


def coerce_attribute_value(raw: Any) -> AttributeValue:
    """Normalize a raw attribute value into an AttributeValue variant.

    Never raises; unusable values become UnsupportedValue.
    """
    if isinstance(raw, (ScalarValue, NameIDValue, UnsupportedValue)):
        return raw

    # bool is an int subclass but never a meaningful identifier
    if isinstance(raw, bool):
        return UnsupportedValue(type_name="bool")

    if isinstance(raw, (str, int)):
        return ScalarValue(value=raw)

    if isinstance(raw, ET.Element):
        return _name_id_from_element(raw)

    if isinstance(raw, Mapping):
        return _name_id_from_mapping(raw)

    if isinstance(raw, (list, tuple)):
        if len(raw) == 1:
            node = coerce_attribute_value(raw[0])
            if isinstance(node, NameIDValue):
                return node
            return UnsupportedValue(type_name=type(raw).__name__)
        return NameIDValue(format=None, value=None, node_count=len(raw))

    return UnsupportedValue(type_name=type(raw).__name__)


def extract_identifier_value(value: AttributeValue | Any) -> str:
    """Extract the scalar identifier value.

    Args:
        value: AttributeValue variant or raw value (coerced first).

    Returns:
        The identifier value as a string.

    Raises:
        UnsupportedAttributeValue: If the value is not a scalar or a single
            persistent NameID with a non-empty value.
    """
    value = coerce_attribute_value(value)

    if isinstance(value, ScalarValue):
        text = str(value)
        if not text:
            raise UnsupportedAttributeValue("Empty attribute value")
        return text

    if isinstance(value, NameIDValue):
        if value.node_count != 1:
            raise UnsupportedAttributeValue(f"Expected exactly one NameID node, got {value.node_count}")
        if value.format != NAMEID_PERSISTENT or not value.value:
            raise UnsupportedAttributeValue("Unsupported NameID format")
        return value.value

    raise UnsupportedAttributeValue(f"Unsupported attribute value type: {value.type_name}")


def parse_name_id_xml(xml: str | bytes) -> NameIDValue:
    """Parse serialized SAML NameID XML.

    The document root may be a single <saml:NameID> element, or any wrapper
    element whose direct children are NameID elements (e.g. an
    eduPersonTargetedID AttributeValue).

    Args:
        xml: Serialized XML.

    Returns:
        NameIDValue for the parsed node(s).

    Raises:
        UnsupportedAttributeValue: If the XML is malformed or holds no NameID.
    """
    try:
        root = ET.fromstring(xml)
    except ET.ParseError as e:
        raise UnsupportedAttributeValue(f"Malformed NameID XML: {e}") from e

    if _is_name_id(root):
        return _name_id_from_element(root)

    nodes = [child for child in root if _is_name_id(child)]
    if not nodes:
        raise UnsupportedAttributeValue(f"No NameID element in {root.tag}")
    if len(nodes) == 1:
        return _name_id_from_element(nodes[0])
    return NameIDValue(format=None, value=None, node_count=len(nodes))


def _is_name_id(element: ET.Element) -> bool:
    # Accept un-namespaced NameID too; upstream adapters sometimes strip ns
    return element.tag in (_NAMEID_TAG, "NameID")


def _name_id_from_element(element: ET.Element) -> NameIDValue:
    text = (element.text or "").strip()
    return NameIDValue(format=element.get("Format"), value=text or None)


def _name_id_from_mapping(raw: Mapping[str, Any]) -> NameIDValue:
    fmt = raw.get("Format", raw.get("format"))
    value = raw.get("Value", raw.get("value"))
    if value is not None and not isinstance(value, str):
        value = str(value)
    return NameIDValue(
        format=fmt if isinstance(fmt, str) else None,
        value=value or None,
    )
