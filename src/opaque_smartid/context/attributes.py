"""Attribute value model for identifier derivation.

Attribute values arrive from upstream assertion parsing either as plain
scalars or as structured SAML name identifiers. Both are normalized into a
small tagged union so the deriver dispatches on the variant instead of
inspecting arbitrary upstream objects:

    AttributeValue
    ├── ScalarValue       - plain string or integer
    ├── NameIDValue       - structured NameID (format marker + value)
    └── UnsupportedValue  - anything else (reported, never used)
"""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass
from typing import Any, Union

__all__ = [
    "AttributeBag",
    "AttributeValue",
    "NameIDValue",
    "ScalarValue",
    "UnsupportedValue",
]


@dataclass(frozen=True)
class ScalarValue:
    """Plain string or integer attribute value.

    Attributes:
        value: The raw value, used as-is in the canonical string.
    """

    value: str | int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class NameIDValue:
    """Structured SAML name identifier.

    Attributes:
        format: NameID Format URI, None if the node carries none.
        value: Text content of the NameID element.
        node_count: Number of NameID nodes the upstream value held.
            Only a single node is usable.
    """

    format: str | None
    value: str | None
    node_count: int = 1


@dataclass(frozen=True)
class UnsupportedValue:
    """Value of a type the deriver cannot use.

    Attributes:
        type_name: Python type name of the rejected value, for diagnostics.
    """

    type_name: str


AttributeValue = Union[ScalarValue, NameIDValue, UnsupportedValue]

# Attribute name -> ordered values. Values may be raw (str, int, mapping,
# XML element) or already-normalized AttributeValue instances.
AttributeBag = MutableMapping[str, list[Any]]
