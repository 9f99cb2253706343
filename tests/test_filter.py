"""Tests for the authentication processing filter.

Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

from __future__ import annotations

import hashlib
from typing import Any

import pytest

from opaque_smartid.config import SmartIDPolicy
from opaque_smartid.deriver import ErrorReport, Failure
from opaque_smartid.exceptions import ConfigurationError, NoUsableAttribute
from opaque_smartid.pep import OpaqueSmartIDFilter, build_request_context
from opaque_smartid.pips import StaticMetadataLookup
from opaque_smartid.security import StaticSaltProvider

SALT = "s3cr3t"
AUTHORITY = "https://idp.example"
PROXIED_IDP = "https://proxied-idp.example"


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def request_state() -> dict[str, Any]:
    """Request as handed over by the authentication pipeline."""
    return {
        "Attributes": {"eduPersonPrincipalName": ["alice@example.org"]},
        "saml:AuthenticatingAuthority": ["https://outer.example", AUTHORITY],
        "saml:sp:IdP": PROXIED_IDP,
        "Source": {"entityid": "https://proxy.example", "tags": ["edugain"]},
    }


@pytest.fixture
def metadata() -> StaticMetadataLookup:
    return StaticMetadataLookup(
        {PROXIED_IDP: {"name": {"en": "Proxied University", "el": "Πανεπιστήμιο"}, "tags": ["social"]}}
    )


# ============================================================================
# Tests: Context Building
# ============================================================================


class TestBuildRequestContext:
    """Tests for build_request_context."""

    def test_reads_pipeline_keys(self, request_state: dict[str, Any]):
        # Act
        context = build_request_context(request_state)

        # Assert
        assert context.authenticating_authorities == ("https://outer.example", AUTHORITY)
        assert context.effective_authority == AUTHORITY
        assert context.idp_entity_id == PROXIED_IDP
        assert context.source_entity_id == "https://proxy.example"
        assert context.idp_tags == frozenset({"edugain"})

    def test_metadata_tags_take_precedence_for_proxied_idp(
        self, request_state: dict[str, Any], metadata: StaticMetadataLookup
    ):
        # Act
        context = build_request_context(request_state, metadata)

        # Assert
        assert context.idp_tags == frozenset({"social"})

    def test_single_string_tag_is_one_tag(self):
        # Act
        context = build_request_context(
            {"Attributes": {}, "Source": {"entityid": "https://proxy.example", "tags": "social"}}
        )

        # Assert
        assert context.idp_tags == frozenset({"social"})

    def test_single_string_tag_blacklisted(self, sink):
        # Arrange
        policy = SmartIDPolicy(secret_salt=SALT, idp_tag_blacklist=["social"])
        request = {
            "Attributes": {
                "eduPersonPrincipalName": ["alice@example.org"],
                "voPersonID": ["abc123@community.example"],
            },
            "Source": {"entityid": "https://proxy.example", "tags": "social"},
        }

        # Act
        identifier = OpaqueSmartIDFilter(policy, sink=sink).process(request)

        # Assert
        assert identifier.passthrough is True
        assert identifier.value == "abc123@community.example"

    def test_missing_keys_give_empty_context(self):
        # Act
        context = build_request_context({"Attributes": {}})

        # Assert
        assert context.authenticating_authorities == ()
        assert context.idp_tags is None
        assert context.effective_authority is None


# ============================================================================
# Tests: process()
# ============================================================================


class TestProcess:
    """Tests for OpaqueSmartIDFilter.process."""

    def test_writes_identifier_and_user_id(self, request_state: dict[str, Any], sink):
        # Arrange
        smartid = OpaqueSmartIDFilter(SmartIDPolicy(secret_salt=SALT), sink=sink)
        expected = hashlib.sha256(
            f"eduPersonPrincipalName:alice@example.org!{AUTHORITY}!{SALT}".encode()
        ).hexdigest()

        # Act
        identifier = smartid.process(request_state)

        # Assert
        assert identifier.value == expected
        assert request_state["Attributes"]["smart_id"] == [expected]
        assert request_state["UserID"] == expected

    def test_custom_id_attribute_without_user_id(self, request_state: dict[str, Any], sink):
        # Arrange
        policy = SmartIDPolicy(
            secret_salt=SALT,
            id_attribute="eduPersonUniqueId",
            set_userid_attribute=False,
            scope="example.org",
        )
        smartid = OpaqueSmartIDFilter(policy, sink=sink)

        # Act
        identifier = smartid.process(request_state)

        # Assert
        assert request_state["Attributes"]["eduPersonUniqueId"] == [identifier.value]
        assert identifier.value.endswith("@example.org")
        assert "UserID" not in request_state

    def test_pass_through_written_verbatim(
        self, request_state: dict[str, Any], metadata: StaticMetadataLookup, sink
    ):
        # Arrange
        policy = SmartIDPolicy(secret_salt=SALT, idp_tag_blacklist=["social"])
        request_state["Attributes"]["voPersonID"] = ["abc123@community.example"]
        smartid = OpaqueSmartIDFilter(policy, metadata=metadata, sink=sink)

        # Act
        smartid.process(request_state)

        # Assert
        assert request_state["Attributes"]["smart_id"] == ["abc123@community.example"]
        assert request_state["UserID"] == "abc123@community.example"

    def test_no_usable_attribute_raises_with_report(
        self, request_state: dict[str, Any], metadata: StaticMetadataLookup, sink
    ):
        # Arrange
        request_state["Attributes"] = {"mail": ["alice@example.org"]}
        policy = SmartIDPolicy(secret_salt=SALT, candidates=["eduPersonUniqueId", "eduPersonPrincipalName"])
        smartid = OpaqueSmartIDFilter(policy, metadata=metadata, sink=sink)

        # Act
        with pytest.raises(NoUsableAttribute) as exc_info:
            smartid.process(request_state)

        # Assert
        error = exc_info.value
        assert error.failure == Failure(
            candidates_tried=("eduPersonUniqueId", "eduPersonPrincipalName"),
            source_display="Proxied University",
        )
        assert error.report == ErrorReport(
            error_code="NOATTRIBUTE",
            parameters={
                "%ATTRIBUTES%": "<ul><li>eduPersonUniqueId</li><li>eduPersonPrincipalName</li></ul>",
                "%IDP%": "Proxied University",
            },
        )
        assert "smart_id" not in request_state["Attributes"]
        assert "UserID" not in request_state

    def test_failure_display_falls_back_to_entity_id(self, sink):
        # Arrange
        smartid = OpaqueSmartIDFilter(SmartIDPolicy(secret_salt=SALT), sink=sink)
        request = {"Attributes": {}, "Source": {"entityid": "https://idp.example"}}

        # Act & Assert
        with pytest.raises(NoUsableAttribute, match="https://idp.example"):
            smartid.process(request)

    def test_missing_attributes_raises(self, sink):
        # Arrange
        smartid = OpaqueSmartIDFilter(SmartIDPolicy(secret_salt=SALT), sink=sink)

        # Act & Assert
        with pytest.raises(ValueError, match="Attributes"):
            smartid.process({})


class TestFromConfig:
    """Tests for OpaqueSmartIDFilter.from_config."""

    def test_from_config(self, request_state: dict[str, Any], sink):
        # Arrange
        smartid = OpaqueSmartIDFilter.from_config(
            {"add_authority": False, "add_candidate": False},
            salt_provider=StaticSaltProvider(SALT),
            sink=sink,
        )

        # Act
        identifier = smartid.process(request_state)

        # Assert
        assert identifier.value == hashlib.sha256(f"alice@example.org!{SALT}".encode()).hexdigest()

    def test_invalid_config_raises(self):
        with pytest.raises(ConfigurationError):
            OpaqueSmartIDFilter.from_config({"add_authority": "yes"}, salt_provider=StaticSaltProvider(SALT))
