"""Workflow error types, classified error categories and error code mapping."""

from enum import Enum
from typing import List, Optional


class ErrorCategory(str, Enum):
    """Closed taxonomy the host UI branches on.

    The first six are produced by classifying backend failures, in match
    priority order. The payload categories are only produced for scans that
    were rejected before any network call.
    """
    INVALID_PIN = "InvalidPin"
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    RECIPIENT_NOT_FOUND = "RecipientNotFound"
    LIMIT_EXCEEDED = "LimitExceeded"
    ACCOUNT_BLOCKED = "AccountBlocked"
    UNCLASSIFIED = "Unclassified"

    MALFORMED_PAYLOAD = "MalformedPayload"
    MISSING_REQUIRED_FIELDS = "MissingRequiredFields"
    UNSUPPORTED_INTENT_KIND = "UnsupportedIntentKind"

    @property
    def requires_rescan(self) -> bool:
        """True when only a new scan can resolve the error."""
        return self in (
            ErrorCategory.MALFORMED_PAYLOAD,
            ErrorCategory.MISSING_REQUIRED_FIELDS,
            ErrorCategory.UNSUPPORTED_INTENT_KIND,
        )


class ScanPayError(Exception):
    """Base error for the scan-to-pay workflow."""
    pass


class PayloadError(ScanPayError):
    """Scanned payload rejected before any network call."""

    category: ErrorCategory = ErrorCategory.MALFORMED_PAYLOAD


class MalformedPayloadError(PayloadError):
    """Payload is not a structured record, even after quote repair."""

    category = ErrorCategory.MALFORMED_PAYLOAD


class MissingRequiredFieldsError(PayloadError):
    """Payload parsed but lacks payer identity or account fields."""

    category = ErrorCategory.MISSING_REQUIRED_FIELDS

    def __init__(self, missing_fields: List[str]):
        """Initialize with the canonical names of the missing fields.

        Args:
            missing_fields: Canonical field names, e.g. ``["payer_email"]``
        """
        self.missing_fields = list(missing_fields)
        super().__init__(
            f"Invalid QR code - missing required fields: {', '.join(self.missing_fields)}"
        )


class UnsupportedIntentKindError(PayloadError):
    """Payload is well formed but is not a payment code (e.g. an ID badge)."""

    category = ErrorCategory.UNSUPPORTED_INTENT_KIND

    def __init__(self, intent_kind: Optional[str]):
        self.intent_kind = intent_kind
        super().__init__(f"Invalid QR code - not a payment QR code (kind: {intent_kind!r})")


class ValidationError(ScanPayError):
    """User input (amount, PIN) rejected before submission."""
    pass


class StateError(ScanPayError):
    """Event not permitted in the current workflow state."""
    pass


class TransferError(ScanPayError):
    """Transfer submission failed."""
    pass


class TransferRejectedError(TransferError):
    """Backend answered the transfer with a failure indication.

    ``raw_error`` holds the backend's short error string. It is consumed by the
    classifier and never shown to the user verbatim.
    """

    def __init__(self, raw_error: str, status_code: Optional[int] = None):
        self.raw_error = raw_error
        self.status_code = status_code
        super().__init__(raw_error)


class ScannerUnavailableError(ScanPayError):
    """No usable camera: none found or permission denied."""
    pass


class ScanPayErrorCode:
    """Machine-readable codes for workflow exceptions."""
    MALFORMED_PAYLOAD = "MALFORMED_PAYLOAD"
    MISSING_REQUIRED_FIELDS = "MISSING_REQUIRED_FIELDS"
    UNSUPPORTED_INTENT_KIND = "UNSUPPORTED_INTENT_KIND"
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_STATE = "INVALID_STATE"
    TRANSFER_REJECTED = "TRANSFER_REJECTED"
    TRANSFER_FAILED = "TRANSFER_FAILED"
    SCANNER_UNAVAILABLE = "SCANNER_UNAVAILABLE"

    @classmethod
    def get_all_codes(cls) -> list[str]:
        """Returns all defined error codes."""
        return [
            cls.MALFORMED_PAYLOAD,
            cls.MISSING_REQUIRED_FIELDS,
            cls.UNSUPPORTED_INTENT_KIND,
            cls.INVALID_INPUT,
            cls.INVALID_STATE,
            cls.TRANSFER_REJECTED,
            cls.TRANSFER_FAILED,
            cls.SCANNER_UNAVAILABLE,
        ]


def map_error_to_code(error: Exception) -> str:
    """Maps workflow exceptions to error codes."""
    # Subclasses before their bases.
    error_mapping = (
        (MalformedPayloadError, ScanPayErrorCode.MALFORMED_PAYLOAD),
        (MissingRequiredFieldsError, ScanPayErrorCode.MISSING_REQUIRED_FIELDS),
        (UnsupportedIntentKindError, ScanPayErrorCode.UNSUPPORTED_INTENT_KIND),
        (PayloadError, ScanPayErrorCode.MALFORMED_PAYLOAD),
        (ValidationError, ScanPayErrorCode.INVALID_INPUT),
        (StateError, ScanPayErrorCode.INVALID_STATE),
        (TransferRejectedError, ScanPayErrorCode.TRANSFER_REJECTED),
        (TransferError, ScanPayErrorCode.TRANSFER_FAILED),
        (ScannerUnavailableError, ScanPayErrorCode.SCANNER_UNAVAILABLE),
    )
    for error_type, code in error_mapping:
        if isinstance(error, error_type):
            return code
    return "UNKNOWN_ERROR"
