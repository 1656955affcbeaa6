"""Backend failure classification into the closed error taxonomy.

Matching is driven by ``CLASSIFICATION_TABLE``. Raw messages are reduced to
lower-case alphanumerics before matching so that the backend's short codes
(``InvalidPin``) and its human sentences (``Invalid PIN``) land in the same
category. The table is coupled to the backend's error vocabulary: bump
``CLASSIFIER_TABLE_VERSION`` whenever an entry changes and keep
``tests/core/test_classifier.py`` in step with the backend contract.
"""

import logging
import re
from typing import Any, List, NamedTuple, Optional, Tuple

from ..types import (
    ClassifiedError,
    ErrorCategory,
    PayloadError,
    TransferRejectedError
)


logger = logging.getLogger(__name__)

CLASSIFIER_TABLE_VERSION = 1


class ClassificationRule(NamedTuple):
    category: ErrorCategory
    needles: Tuple[str, ...]
    guidance: str


# Priority order: first matching rule wins.
CLASSIFICATION_TABLE: Tuple[ClassificationRule, ...] = (
    ClassificationRule(
        ErrorCategory.INVALID_PIN,
        ("invalidpin", "incorrectpin", "wrongpin"),
        "Invalid PIN. Please ask the customer to enter their correct 4-digit PIN.",
    ),
    ClassificationRule(
        ErrorCategory.INSUFFICIENT_FUNDS,
        ("insufficientfunds", "insufficientbalance"),
        "Insufficient funds. The customer does not have enough balance for this transaction.",
    ),
    ClassificationRule(
        ErrorCategory.RECIPIENT_NOT_FOUND,
        ("usernotfound", "recipientnotfound"),
        "Recipient not found. Please verify the QR code is valid.",
    ),
    ClassificationRule(
        ErrorCategory.LIMIT_EXCEEDED,
        ("transactionlimitexceeded", "limitexceeded"),
        "Transaction limit exceeded. Please try a smaller amount.",
    ),
    ClassificationRule(
        ErrorCategory.ACCOUNT_BLOCKED,
        ("accountblocked",),
        "Account temporarily blocked. Please contact support.",
    ),
)

UNCLASSIFIED_GUIDANCE = "Transaction failed. Please try again."

PAYLOAD_GUIDANCE = {
    ErrorCategory.MALFORMED_PAYLOAD: "Couldn't read QR code. Please ensure this is a valid payment QR code.",
    ErrorCategory.MISSING_REQUIRED_FIELDS: "This QR code is missing payer details. Ask the customer to regenerate their payment QR code.",
    ErrorCategory.UNSUPPORTED_INTENT_KIND: "This is not a payment QR code. Ask the customer to show their payment QR code.",
}

PIN_TIPS = [
    "Ask customer to enter their exact 4-digit PIN",
    "Ensure the PIN pad is not visible to others",
    "If PIN is forgotten, customer should reset it via the app",
]

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def classify(raw_error: Any) -> ClassifiedError:
    """Maps a raw backend failure to a category with user guidance.

    Args:
        raw_error: Backend error string, response body dict, exception or None

    Returns:
        ClassifiedError; UNCLASSIFIED when nothing matches. Never raises.
    """
    try:
        if isinstance(raw_error, PayloadError):
            return _payload_error(raw_error)

        message = extract_message(raw_error)
        if message:
            key = _NON_ALNUM.sub("", message.lower())
            for rule in CLASSIFICATION_TABLE:
                if any(needle in key for needle in rule.needles):
                    return ClassifiedError(
                        category=rule.category,
                        guidance=rule.guidance,
                        pin_tips=list(PIN_TIPS) if rule.category is ErrorCategory.INVALID_PIN else [],
                        raw=message,
                    )
        logger.info(f"Unclassified transfer failure: {message!r}")
        return ClassifiedError(
            category=ErrorCategory.UNCLASSIFIED,
            guidance=UNCLASSIFIED_GUIDANCE,
            raw=message,
        )
    except Exception as e:
        logger.error(f"Error classifier failed on {type(raw_error).__name__}: {e}", exc_info=True)
        return ClassifiedError(category=ErrorCategory.UNCLASSIFIED, guidance=UNCLASSIFIED_GUIDANCE)


def extract_message(raw_error: Any) -> Optional[str]:
    """Pulls the backend's short error string out of whatever was raised.

    Transport exceptions carry no backend message and yield None.
    """
    if raw_error is None:
        return None
    if isinstance(raw_error, str):
        return raw_error.strip() or None
    if isinstance(raw_error, TransferRejectedError):
        return raw_error.raw_error.strip() or None
    if isinstance(raw_error, dict):
        for key in ("error", "message"):
            value = raw_error.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
        return None
    return None


def categories_in_priority_order() -> List[ErrorCategory]:
    """Backend categories in match order, ending with the catch-all."""
    return [rule.category for rule in CLASSIFICATION_TABLE] + [ErrorCategory.UNCLASSIFIED]


def _payload_error(error: PayloadError) -> ClassifiedError:
    return ClassifiedError(
        category=error.category,
        guidance=PAYLOAD_GUIDANCE[error.category],
        retryable=False,
        raw=str(error),
    )
