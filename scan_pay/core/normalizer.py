"""Scanned payload normalization into a validated PaymentIntent."""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from ..types import (
    PaymentIntent,
    IntentKind,
    MalformedPayloadError,
    MissingRequiredFieldsError,
    UnsupportedIntentKindError
)


logger = logging.getLogger(__name__)

# Curly, low-9 and prime quote variants produced by phone keyboards and
# copy/paste, plus the ASCII apostrophe.
_QUOTE_VARIANTS = "‘’‚‛“”„‟′″'"
_QUOTE_REPAIR = str.maketrans({ch: '"' for ch in _QUOTE_VARIANTS})

# Legacy spellings, canonical first.
PAYER_ID_KEYS = ("userId", "userld")
PAYMENT_KIND_VALUES = {
    "transactionType": "payment",
    "type": "payment_request",
}

REQUIRED_FIELDS = ("payer_id", "payer_name", "account_number", "payer_email")

# Epoch values above this are milliseconds.
_MILLIS_THRESHOLD = 10 ** 11


def normalize(raw: Union[str, bytes, None]) -> PaymentIntent:
    """Turns a scanned string into a validated PaymentIntent.

    Args:
        raw: Decoded string handed over by the scan capability

    Returns:
        PaymentIntent with canonical field names

    Raises:
        MalformedPayloadError: payload is not a JSON object, even after quote repair
        MissingRequiredFieldsError: payer id, name, account number or email missing
        UnsupportedIntentKindError: payload is not a payment code
    """
    record = parse_record(raw)
    fields = reconcile_fields(record)

    missing = [name for name in REQUIRED_FIELDS if not fields.get(name)]
    if missing:
        logger.warning(f"Scanned payload missing required fields: {missing}")
        raise MissingRequiredFieldsError(missing)

    if not is_payment_kind(record):
        kind = _text(record.get("transactionType")) or _text(record.get("type"))
        logger.warning(f"Scanned payload is not a payment code (kind={kind!r})")
        raise UnsupportedIntentKindError(kind)

    return PaymentIntent(intent_kind=IntentKind.PAYMENT, **fields)


def parse_record(raw: Union[str, bytes, None]) -> Dict[str, Any]:
    """Parses the payload strictly, then once more after quote repair."""
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedPayloadError("Invalid QR code format") from e
    if not isinstance(raw, str) or not raw.strip():
        raise MalformedPayloadError("Invalid QR code format")

    try:
        parsed = json.loads(raw)
    except ValueError:
        repaired = raw.translate(_QUOTE_REPAIR)
        try:
            parsed = json.loads(repaired)
        except ValueError as e:
            logger.debug(f"Payload still unparseable after quote repair: {e}")
            raise MalformedPayloadError("Invalid QR code format") from e
        logger.debug("Payload parsed after quote repair")

    if not isinstance(parsed, dict):
        raise MalformedPayloadError("Invalid QR code format")
    return parsed


def reconcile_fields(record: Dict[str, Any]) -> Dict[str, Any]:
    """Resolves legacy key spellings into PaymentIntent field names."""
    payer_id = None
    for key in PAYER_ID_KEYS:
        payer_id = _text(record.get(key))
        if payer_id:
            break

    name = _text(record.get("name"))
    if not name:
        parts = [_text(record.get("firstName")), _text(record.get("lastName"))]
        name = " ".join(part for part in parts if part) or None

    wallet = record.get("wallet")
    currency = _text(record.get("currency"))
    if not currency and isinstance(wallet, dict):
        currency = _text(wallet.get("currency"))

    return {
        "payer_id": payer_id,
        "payer_name": name,
        "payer_email": _text(record.get("email")),
        "account_number": _text(record.get("accountNumber")),
        "currency_code": currency,
        "captured_at": _timestamp(record.get("timestamp")),
        "role": _text(record.get("role")),
        "wallet_id": _text(record.get("walletId")),
        "code_version": _text(record.get("qrCodeVersion")),
    }


def is_payment_kind(record: Dict[str, Any]) -> bool:
    """True when either legacy kind field carries its payment value."""
    for key, expected in PAYMENT_KIND_VALUES.items():
        value = _text(record.get(key))
        if value and value.lower() == expected:
            return True
    return False


def _text(value: Any) -> Optional[str]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, (str, int, float)):
        return str(value).strip() or None
    return None


def _timestamp(value: Any) -> datetime:
    now = datetime.now(timezone.utc)
    if isinstance(value, bool) or value is None:
        return now

    if isinstance(value, str):
        text = value.strip()
        try:
            value = float(text)
        except ValueError:
            try:
                parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
            except ValueError:
                return now
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed

    if isinstance(value, (int, float)):
        seconds = value / 1000 if value > _MILLIS_THRESHOLD else value
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return now
    return now
