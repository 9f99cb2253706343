"""Shared fixtures for opaque-smartid tests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from opaque_smartid.config import SmartIDPolicy
from opaque_smartid.constants import NAMEID_PERSISTENT

SALT = "s3cr3t"


class RecordingSink:
    """Diagnostic sink that keeps every event for assertions."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def notice(self, event: str, fields: Mapping[str, Any]) -> None:
        self.events.append((event, dict(fields)))

    def names(self) -> list[str]:
        return [event for event, _ in self.events]

    def fields_of(self, event: str) -> list[dict[str, Any]]:
        return [fields for name, fields in self.events if name == event]


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def policy() -> SmartIDPolicy:
    """Default policy with the test salt."""
    return SmartIDPolicy(secret_salt=SALT)


@pytest.fixture
def persistent_name_id() -> dict[str, str]:
    return {"Format": NAMEID_PERSISTENT, "Value": "a1b2c3"}
