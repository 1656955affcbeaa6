"""scan_pay - QR scan-to-pay authorization workflow for field agents."""

# Workflow Types
from .types import (
    # State
    TransactionState,
    IntentKind,
    CameraFacing,

    # Models
    PaymentIntent,
    Charge,
    SessionCredential,
    TransactionRequest,
    TransferResponse,
    ClassifiedError,
    TransactionResult,
    ScanDevice,
    TransactionView,

    # Configuration
    ScanPayConfig,

    # Error Types
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

# Core Functions
from .core import (
    normalize,
    classify,
    transition,
    FeeResolver,
    ScanPayBackendClient,
    select_transfer_charge,
    format_amount,
    total_deducted
)

# Scan capability
from .scanner import (
    ScanSessionController,
    QueuedScanSession
)

# Orchestration
from .executors import TransactionOrchestrator

__version__ = "0.1.0"

__all__ = [
    # State
    "TransactionState",
    "IntentKind",
    "CameraFacing",

    # Models
    "PaymentIntent",
    "Charge",
    "SessionCredential",
    "TransactionRequest",
    "TransferResponse",
    "ClassifiedError",
    "TransactionResult",
    "ScanDevice",
    "TransactionView",

    # Configuration
    "ScanPayConfig",

    # Error Types
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

    # Core Functions
    "normalize",
    "classify",
    "transition",
    "FeeResolver",
    "ScanPayBackendClient",
    "select_transfer_charge",
    "format_amount",
    "total_deducted",

    # Scan capability
    "ScanSessionController",
    "QueuedScanSession",

    # Orchestration
    "TransactionOrchestrator"
]
