"""Tests for backend failure classification.

These double as the contract check against the backend's error vocabulary:
update them together with CLASSIFICATION_TABLE.
"""

import httpx
import pytest

from scan_pay.core.classifier import (
    CLASSIFIER_TABLE_VERSION,
    UNCLASSIFIED_GUIDANCE,
    categories_in_priority_order,
    classify,
    extract_message
)
from scan_pay.types import (
    ErrorCategory,
    MalformedPayloadError,
    MissingRequiredFieldsError,
    TransferRejectedError,
    UnsupportedIntentKindError
)


class TestBackendVocabulary:

    @pytest.mark.parametrize("raw, category", [
        ("Invalid PIN", ErrorCategory.INVALID_PIN),
        ("InvalidPin", ErrorCategory.INVALID_PIN),
        ("Insufficient funds", ErrorCategory.INSUFFICIENT_FUNDS),
        ("InsufficientFunds", ErrorCategory.INSUFFICIENT_FUNDS),
        ("User not found", ErrorCategory.RECIPIENT_NOT_FOUND),
        ("UserNotFound", ErrorCategory.RECIPIENT_NOT_FOUND),
        ("Transaction limit exceeded", ErrorCategory.LIMIT_EXCEEDED),
        ("TransactionLimitExceeded", ErrorCategory.LIMIT_EXCEEDED),
        ("Account blocked", ErrorCategory.ACCOUNT_BLOCKED),
        ("AccountBlocked", ErrorCategory.ACCOUNT_BLOCKED),
    ])
    def test_known_errors(self, raw, category):
        assert classify(raw).category == category

    def test_unexpected_string(self):
        classified = classify("some unexpected string")
        assert classified.category == ErrorCategory.UNCLASSIFIED
        assert classified.guidance == UNCLASSIFIED_GUIDANCE

    def test_priority_order(self):
        classified = classify("Invalid PIN; account blocked after retries")
        assert classified.category == ErrorCategory.INVALID_PIN
        assert categories_in_priority_order() == [
            ErrorCategory.INVALID_PIN,
            ErrorCategory.INSUFFICIENT_FUNDS,
            ErrorCategory.RECIPIENT_NOT_FOUND,
            ErrorCategory.LIMIT_EXCEEDED,
            ErrorCategory.ACCOUNT_BLOCKED,
            ErrorCategory.UNCLASSIFIED,
        ]

    def test_each_category_has_distinct_guidance(self):
        samples = ["Invalid PIN", "Insufficient funds", "User not found",
                   "Transaction limit exceeded", "Account blocked", "???"]
        guidance = {classify(raw).guidance for raw in samples}
        assert len(guidance) == len(samples)

    def test_pin_tips_only_for_invalid_pin(self):
        assert classify("Invalid PIN").pin_tips
        assert not classify("Insufficient funds").pin_tips

    def test_table_is_versioned(self):
        assert isinstance(CLASSIFIER_TABLE_VERSION, int)


class TestInputShapes:

    def test_rejected_error(self):
        assert classify(TransferRejectedError("Insufficient funds")).category == ErrorCategory.INSUFFICIENT_FUNDS

    def test_response_body(self):
        assert classify({"error": "Invalid PIN"}).category == ErrorCategory.INVALID_PIN
        assert classify({"message": "User not found"}).category == ErrorCategory.RECIPIENT_NOT_FOUND

    def test_error_key_preferred_over_message(self):
        assert extract_message({"error": "Invalid PIN", "message": "Transaction failed"}) == "Invalid PIN"

    def test_transport_errors_are_unclassified(self):
        request = httpx.Request("POST", "https://ledger.test/api/transaction/transfertoagent")
        error = httpx.ConnectError("connection refused", request=request)
        assert classify(error).category == ErrorCategory.UNCLASSIFIED

    @pytest.mark.parametrize("raw", [None, "", 42, ["Invalid PIN"], {"error": 3}, object()])
    def test_never_raises(self, raw):
        assert classify(raw).category == ErrorCategory.UNCLASSIFIED

    def test_raw_string_not_exposed(self):
        classified = classify("InsufficientFunds")
        assert "raw" not in classified.model_dump()


class TestPayloadRejections:

    @pytest.mark.parametrize("error, category", [
        (MalformedPayloadError("bad"), ErrorCategory.MALFORMED_PAYLOAD),
        (MissingRequiredFieldsError(["payer_email"]), ErrorCategory.MISSING_REQUIRED_FIELDS),
        (UnsupportedIntentKindError("identity_badge"), ErrorCategory.UNSUPPORTED_INTENT_KIND),
    ])
    def test_payload_categories(self, error, category):
        classified = classify(error)
        assert classified.category == category
        assert not classified.retryable
