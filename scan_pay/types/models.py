"""Payment intent, charge, request and result models."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import ErrorCategory
from .state import CameraFacing, IntentKind, TransactionState


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _json_number(value: Decimal) -> Union[int, float]:
    """Render a Decimal the way the backend expects JSON numbers."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


class PaymentIntent(BaseModel):
    """Validated payer code, ready for fee attachment and confirmation."""
    model_config = ConfigDict(frozen=True)

    payer_id: str = Field(min_length=1)
    payer_name: str = Field(min_length=1)
    payer_email: str = Field(min_length=1)
    account_number: str = Field(min_length=1)
    currency_code: Optional[str] = None
    intent_kind: IntentKind = IntentKind.PAYMENT
    captured_at: datetime = Field(default_factory=_utcnow)
    role: Optional[str] = None
    wallet_id: Optional[str] = None
    code_version: Optional[str] = None


class Charge(BaseModel):
    """Named fee rule from the charges configuration service."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    amount: Decimal
    status: str
    applies_to: Optional[str] = Field(default=None, alias="appliesTo")

    def is_active_transfer(self, keyword: str = "transfer", active_status: str = "Active") -> bool:
        return keyword.lower() in self.name.lower() and self.status == active_status


class SessionCredential(BaseModel):
    """Agent session bearer token, read only within the workflow."""
    model_config = ConfigDict(frozen=True)

    token: str = Field(min_length=1, repr=False)

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


class TransactionRequest(BaseModel):
    """One transfer attempt built from the frozen intent, amount, fee and PIN."""
    model_config = ConfigDict(frozen=True)

    intent: PaymentIntent
    amount: Decimal = Field(gt=0)
    fee: Decimal = Field(default=Decimal(0), ge=0)
    pin: str = Field(min_length=1, repr=False, exclude=True)
    idempotency_marker: str = Field(min_length=1)

    @property
    def total(self) -> Decimal:
        """Amount plus fee, as deducted from the payer."""
        return self.amount + self.fee

    def to_wire(self) -> Dict[str, Any]:
        """Body for the transfer endpoint."""
        return {
            "senderEmail": self.intent.payer_email,
            "amount": _json_number(self.amount),
            "pin": self.pin,
            "transactionFee": _json_number(self.fee),
        }


class TransferResponse(BaseModel):
    """Body returned by the transfer endpoint."""
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    transaction_id: Optional[str] = Field(default=None, alias="transactionId")
    message: Optional[str] = None
    error: Optional[str] = None


class ClassifiedError(BaseModel):
    """Closed-taxonomy view of a failure, safe to render."""
    category: ErrorCategory
    guidance: str
    retryable: bool = True
    pin_tips: List[str] = Field(default_factory=list)
    # Backend error string, for logs only.
    raw: Optional[str] = Field(default=None, exclude=True, repr=False)


class TransactionResult(BaseModel):
    """Terminal outcome of one submission."""
    succeeded: bool
    transaction_id: Optional[str] = None
    classified_error: Optional[ClassifiedError] = None
    amount: Decimal
    fee: Decimal = Decimal(0)
    completed_at: datetime = Field(default_factory=_utcnow)


class ScanDevice(BaseModel):
    """Video input reported by the scan capability."""
    device_id: str
    label: str = ""
    facing: Optional[CameraFacing] = None


class TransactionView(BaseModel):
    """Read-only snapshot of the workflow for the host UI."""
    state: TransactionState
    intent: Optional[PaymentIntent] = None
    amount: Optional[Decimal] = None
    fee: Optional[Decimal] = None
    total: Optional[Decimal] = None
    description: Optional[str] = None
    pin_entered: bool = False
    error: Optional[ClassifiedError] = None
    result: Optional[TransactionResult] = None
    advisory: Optional[str] = None
    scanning_available: bool = True
    devices: List[ScanDevice] = Field(default_factory=list)
    facing: CameraFacing = CameraFacing.ENVIRONMENT
