"""Types package for scan_pay - workflow state, models, events, errors and configuration."""

from .state import (
    TransactionState,
    IntentKind,
    CameraFacing
)

from .errors import (
    ErrorCategory,
    ScanPayError,
    PayloadError,
    MalformedPayloadError,
    MissingRequiredFieldsError,
    UnsupportedIntentKindError,
    ValidationError,
    StateError,
    TransferError,
    TransferRejectedError,
    ScannerUnavailableError,
    ScanPayErrorCode,
    map_error_to_code
)

from .models import (
    PaymentIntent,
    Charge,
    SessionCredential,
    TransactionRequest,
    TransferResponse,
    ClassifiedError,
    TransactionResult,
    ScanDevice,
    TransactionView
)

from .events import (
    WorkflowEvent,
    ScanStarted,
    ScanDecoded,
    ScanFailed,
    AmountConfirmed,
    PinSubmitted,
    SubmissionResult,
    RetryReady,
    Cancelled
)

from .config import ScanPayConfig

__all__ = [

    "TransactionState",
    "IntentKind",
    "CameraFacing",

    "ErrorCategory",
    "ScanPayError",
    "PayloadError",
    "MalformedPayloadError",
    "MissingRequiredFieldsError",
    "UnsupportedIntentKindError",
    "ValidationError",
    "StateError",
    "TransferError",
    "TransferRejectedError",
    "ScannerUnavailableError",
    "ScanPayErrorCode",
    "map_error_to_code",

    "PaymentIntent",
    "Charge",
    "SessionCredential",
    "TransactionRequest",
    "TransferResponse",
    "ClassifiedError",
    "TransactionResult",
    "ScanDevice",
    "TransactionView",

    "WorkflowEvent",
    "ScanStarted",
    "ScanDecoded",
    "ScanFailed",
    "AmountConfirmed",
    "PinSubmitted",
    "SubmissionResult",
    "RetryReady",
    "Cancelled",

    "ScanPayConfig"
]
