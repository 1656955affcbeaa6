"""Tests for scanned payload normalization."""

import json
from datetime import datetime, timezone

import pytest

from scan_pay.core.normalizer import normalize, parse_record, reconcile_fields
from scan_pay.types import (
    IntentKind,
    MalformedPayloadError,
    MissingRequiredFieldsError,
    UnsupportedIntentKindError
)


class TestParsing:
    """Strict parse, quote repair, record check."""

    def test_accepts_canonical_payload(self, payment_payload_raw):
        intent = normalize(payment_payload_raw)
        assert intent.payer_id == "u1"
        assert intent.payer_name == "Jane"
        assert intent.payer_email == "jane@x.com"
        assert intent.account_number == "001"
        assert intent.intent_kind == IntentKind.PAYMENT

    def test_repairs_single_quotes(self):
        raw = "{'userId': 'u1', 'name': 'Jane', 'email': 'jane@x.com', 'accountNumber': '001', 'transactionType': 'payment'}"
        assert normalize(raw).payer_id == "u1"

    def test_repairs_typographic_quotes(self):
        raw = "{“userId”: “u1”, ‘name’: ‘Jane’, “email”: “jane@x.com”, “accountNumber”: “001”, “transactionType”: “payment”}"
        intent = normalize(raw)
        assert intent.payer_name == "Jane"

    def test_accepts_bytes(self, payment_payload_raw):
        assert normalize(payment_payload_raw.encode("utf-8")).payer_id == "u1"

    @pytest.mark.parametrize("raw", [
        "not json at all",
        "{userId: u1}",
        "",
        "   ",
        None,
        b"\xff\xfe\x00",
    ])
    def test_unparseable_input_is_malformed(self, raw):
        with pytest.raises(MalformedPayloadError):
            normalize(raw)

    @pytest.mark.parametrize("raw", ["null", "[1, 2]", "42", '"payment"', "true"])
    def test_non_record_is_malformed(self, raw):
        with pytest.raises(MalformedPayloadError):
            parse_record(raw)


class TestReconciliation:
    """Legacy key spellings resolve to one canonical shape."""

    def test_legacy_payer_id_key(self, payment_payload):
        payment_payload["userld"] = payment_payload.pop("userId")
        assert normalize(json.dumps(payment_payload)).payer_id == "u1"

    def test_canonical_payer_id_wins(self, payment_payload):
        payment_payload["userld"] = "legacy"
        assert normalize(json.dumps(payment_payload)).payer_id == "u1"

    def test_legacy_kind_field(self, payment_payload):
        del payment_payload["transactionType"]
        payment_payload["type"] = "payment_request"
        assert normalize(json.dumps(payment_payload)).intent_kind == IntentKind.PAYMENT

    def test_currency_from_wallet(self, payment_payload):
        payment_payload["wallet"] = {"currency": "NGN"}
        assert normalize(json.dumps(payment_payload)).currency_code == "NGN"

    def test_name_from_parts(self, payment_payload):
        del payment_payload["name"]
        payment_payload["firstName"] = "Jane"
        payment_payload["lastName"] = "Doe"
        assert normalize(json.dumps(payment_payload)).payer_name == "Jane Doe"

    def test_numeric_values_become_text(self, payment_payload):
        payment_payload["userId"] = 17
        payment_payload["accountNumber"] = 1002003
        intent = normalize(json.dumps(payment_payload))
        assert intent.payer_id == "17"
        assert intent.account_number == "1002003"

    def test_timestamp_in_millis(self, payment_payload):
        payment_payload["timestamp"] = 1700000000000
        intent = normalize(json.dumps(payment_payload))
        assert intent.captured_at == datetime.fromtimestamp(1700000000, tz=timezone.utc)

    def test_timestamp_iso(self, payment_payload):
        payment_payload["timestamp"] = "2024-05-01T10:00:00Z"
        intent = normalize(json.dumps(payment_payload))
        assert intent.captured_at == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)

    def test_bad_timestamp_defaults_to_now(self, payment_payload):
        payment_payload["timestamp"] = "yesterday"
        intent = normalize(json.dumps(payment_payload))
        assert (datetime.now(timezone.utc) - intent.captured_at).total_seconds() < 60

    def test_optional_fields(self, payment_payload):
        payment_payload.update({"role": "student", "walletId": "w-9", "qrCodeVersion": "2"})
        fields = reconcile_fields(payment_payload)
        assert fields["role"] == "student"
        assert fields["wallet_id"] == "w-9"
        assert fields["code_version"] == "2"


class TestValidation:
    """Required fields and intent kind."""

    @pytest.mark.parametrize("key, field", [
        ("userId", "payer_id"),
        ("name", "payer_name"),
        ("accountNumber", "account_number"),
        ("email", "payer_email"),
    ])
    def test_missing_required_field(self, payment_payload, key, field):
        del payment_payload[key]
        with pytest.raises(MissingRequiredFieldsError) as exc_info:
            normalize(json.dumps(payment_payload))
        assert exc_info.value.missing_fields == [field]

    def test_blank_required_field(self, payment_payload):
        payment_payload["email"] = "   "
        with pytest.raises(MissingRequiredFieldsError):
            normalize(json.dumps(payment_payload))

    def test_identity_badge_rejected(self, payment_payload):
        payment_payload["transactionType"] = "identity_badge"
        with pytest.raises(UnsupportedIntentKindError) as exc_info:
            normalize(json.dumps(payment_payload))
        assert exc_info.value.intent_kind == "identity_badge"

    def test_missing_kind_rejected(self, payment_payload):
        del payment_payload["transactionType"]
        with pytest.raises(UnsupportedIntentKindError):
            normalize(json.dumps(payment_payload))

    def test_kind_values_are_not_interchangeable(self, payment_payload):
        del payment_payload["transactionType"]
        payment_payload["type"] = "payment"
        with pytest.raises(UnsupportedIntentKindError):
            normalize(json.dumps(payment_payload))

    def test_missing_fields_checked_before_kind(self, payment_payload):
        del payment_payload["email"]
        payment_payload["transactionType"] = "identity_badge"
        with pytest.raises(MissingRequiredFieldsError):
            normalize(json.dumps(payment_payload))
