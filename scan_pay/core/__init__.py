"""Core package exports for scan_pay."""

from .normalizer import normalize, parse_record, reconcile_fields, is_payment_kind
from .classifier import (
    classify,
    extract_message,
    categories_in_priority_order,
    CLASSIFICATION_TABLE,
    CLASSIFIER_TABLE_VERSION
)
from .client import ScanPayBackendClient, IDEMPOTENCY_HEADER
from .fees import FeeResolver, select_transfer_charge
from .transitions import transition
from .utils import format_amount, total_deducted, new_idempotency_marker

__all__ = [
    # Payload normalization
    "normalize",
    "parse_record",
    "reconcile_fields",
    "is_payment_kind",

    # Error classification
    "classify",
    "extract_message",
    "categories_in_priority_order",
    "CLASSIFICATION_TABLE",
    "CLASSIFIER_TABLE_VERSION",

    # Backend
    "ScanPayBackendClient",
    "IDEMPOTENCY_HEADER",
    "FeeResolver",
    "select_transfer_charge",

    # State machine
    "transition",

    # Utilities
    "format_amount",
    "total_deducted",
    "new_idempotency_marker"
]
