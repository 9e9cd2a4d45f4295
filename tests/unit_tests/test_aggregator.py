"""Unit tests for build_share_request."""

import pytest

from dealerhub_api.sharing.aggregator import build_share_request
from dealerhub_api.sharing.enums import ShareEntity
from dealerhub_api.sharing.errors import NO_RECORDS_SELECTED
from dealerhub_api.sharing.errors import NO_SHARE_TARGET_SELECTED
from dealerhub_api.sharing.errors import ShareValidationError


def _build(**overrides):
    kwargs = {
        "record_ids": ["id1"],
        "channels": [],
        "trust_levels": [],
        "manual_contacts_raw": "",
        "partner_ids": [],
        "partners": [],
        "dealer_id": "dealer1",
        "message": "msg",
    }
    kwargs.update(overrides)
    return build_share_request(**kwargs)


class TestValidation:
    """Tests for the validation order of build_share_request."""

    def test_no_records_selected(self):
        """Test that an empty record list fails whatever the other fields hold."""
        with pytest.raises(ShareValidationError) as exc_info:
            _build(record_ids=[], channels=["Email"], trust_levels=["trusted"], manual_contacts_raw="a@x.com")

        assert exc_info.value.code == NO_RECORDS_SELECTED

    def test_no_records_checked_before_targets(self):
        """Test that the record check short-circuits the target check."""
        with pytest.raises(ShareValidationError) as exc_info:
            _build(record_ids=[])

        assert exc_info.value.code == NO_RECORDS_SELECTED

    def test_no_share_target_selected(self):
        """Test that a request without any target fails."""
        with pytest.raises(ShareValidationError) as exc_info:
            _build()

        assert exc_info.value.code == NO_SHARE_TARGET_SELECTED
        assert "channel" in str(exc_info.value)

    def test_whitespace_manual_contacts_are_not_a_target(self):
        """Test that a whitespace-only contacts field does not count as a target."""
        with pytest.raises(ShareValidationError) as exc_info:
            _build(manual_contacts_raw="   ")

        assert exc_info.value.code == NO_SHARE_TARGET_SELECTED

    def test_separator_only_manual_contacts_pass_with_no_contacts(self):
        """Test that a non-blank field of separators passes and resolves to no contacts."""
        request = _build(manual_contacts_raw=" , ,  ")

        assert request.contacts == []
        assert request.record_ids == ["id1"]

    @pytest.mark.parametrize(
        "overrides",
        [
            {"channels": ["Email"]},
            {"trust_levels": ["verified"]},
            {"manual_contacts_raw": "a@x.com"},
            {"partner_ids": ["p-unknown"]},
        ],
        ids=["channel", "trust_level", "manual_contact", "partner"],
    )
    def test_any_single_target_is_enough(self, overrides):
        """Test that one target of any kind passes validation."""
        request = _build(**overrides)

        assert request.record_ids == ["id1"]

    def test_validation_error_is_value_error(self):
        """Test that ShareValidationError can be caught as ValueError."""
        with pytest.raises(ValueError):
            _build(record_ids=[])


class TestBuildShareRequest:
    """Tests for the assembled ShareRequest."""

    def test_channel_only(self):
        """Test success with a single channel and no contacts."""
        request = _build(channels=["Email"])

        assert request.contacts == []
        assert request.channels == ["Email"]
        assert request.dealer_id == "dealer1"
        assert request.message == "msg"

    def test_channels_and_trust_levels_verbatim(self):
        """Test that channels and trust levels are not normalized."""
        request = _build(channels=[" email", "WhatsApp"], trust_levels=["Trusted "])

        assert request.channels == [" email", "WhatsApp"]
        assert request.trust_levels == ["Trusted "]

    def test_whatsapp_email_trusted_with_manual_contact(self):
        """Test the dashboard scenario with two channels, one trust level and one typed contact."""
        request = _build(
            channels=["WhatsApp", "Email"],
            trust_levels=["trusted"],
            manual_contacts_raw="+41001,  ",
        )

        assert request.contacts == ["+41001"]
        assert request.channels == ["WhatsApp", "Email"]
        assert request.trust_levels == ["trusted"]

    def test_manual_then_partner_contacts(self, partners):
        """Test that manual contacts come before partner contacts."""
        request = _build(manual_contacts_raw="z@z.com", partner_ids=["p1", "p2"], partners=partners)

        assert request.contacts == ["z@z.com", "a@x.com", "+1", "+2"]
        assert request.partner_ids == ["p1", "p2"]

    def test_duplicates_kept_by_default(self, partners):
        """Test that a contact typed manually and resolved from a partner appears twice."""
        request = _build(manual_contacts_raw="a@x.com", partner_ids=["p1"], partners=partners)

        assert request.contacts == ["a@x.com", "a@x.com", "+1"]

    def test_dedupe_contacts(self, partners):
        """Test that dedupe_contacts keeps the first occurrence of each contact."""
        request = _build(
            manual_contacts_raw="a@x.com, +1, a@x.com",
            partner_ids=["p1"],
            partners=partners,
            dedupe_contacts=True,
        )

        assert request.contacts == ["a@x.com", "+1"]

    def test_null_dealer_allowed(self):
        """Test that a missing dealer does not block the request."""
        request = _build(channels=["SMS"], dealer_id=None)

        assert request.dealer_id is None

    def test_generators_accepted(self):
        """Test that any iterable is accepted for the list arguments."""
        request = _build(record_ids=(rid for rid in ["a", "b"]), channels=iter(["Email"]))

        assert request.record_ids == ["a", "b"]
        assert request.channels == ["Email"]


class TestToPayload:
    """Tests for ShareRequest.to_payload."""

    def test_payload_uses_entity_ids_field(self):
        """Test the wire body for each entity."""
        request = _build(channels=["Email"], manual_contacts_raw="+41001")

        payload = request.to_payload(ShareEntity.LEADS)

        assert payload == {
            "lead_ids": ["id1"],
            "dealer_id": "dealer1",
            "channels": ["Email"],
            "shared_with_trust_levels": [],
            "shared_with_contacts": ["+41001"],
            "shared_with_partner_ids": [],
            "message": "msg",
        }

    def test_payload_includes_idempotency_key_when_set(self):
        """Test that the key is sent only when present."""
        request = _build(channels=["Email"], idempotency_key="k-1")

        assert request.to_payload(ShareEntity.RENTALS)["idempotency_key"] == "k-1"
        assert "rental_ids" in request.to_payload(ShareEntity.RENTALS)
        assert "idempotency_key" not in _build(channels=["Email"]).to_payload(ShareEntity.OFFERS)
