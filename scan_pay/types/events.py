"""Discrete events that drive the transaction state machine."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from .errors import ErrorCategory
from .models import ClassifiedError, PaymentIntent, TransactionResult


class WorkflowEvent(BaseModel):
    """Base type for state machine events."""
    pass


class ScanStarted(WorkflowEvent):
    """User started the scan capability."""
    pass


class ScanDecoded(WorkflowEvent):
    """A decoded string was normalized.

    Exactly one of ``intent`` or ``error`` is set.
    """
    intent: Optional[PaymentIntent] = None
    error: Optional[ClassifiedError] = None

    @property
    def accepted(self) -> bool:
        return self.intent is not None


class ScanFailed(WorkflowEvent):
    """Scan capability reported a camera failure while scanning."""
    reason: str = ""


class AmountConfirmed(WorkflowEvent):
    """User confirmed a strictly positive amount (fee already resolved)."""
    amount: Decimal = Field(gt=0)
    description: Optional[str] = None


class PinSubmitted(WorkflowEvent):
    """Payer entered a PIN of the required length."""
    pin: str = Field(repr=False, exclude=True)


class SubmissionResult(WorkflowEvent):
    """Backend answered (or failed to answer) the transfer call."""
    result: TransactionResult

    @property
    def requires_rescan(self) -> bool:
        error = self.result.classified_error
        return bool(error and error.category.requires_rescan)


class RetryReady(WorkflowEvent):
    """Failure has been classified and surfaced; reopen PIN entry."""
    category: ErrorCategory = ErrorCategory.UNCLASSIFIED


class Cancelled(WorkflowEvent):
    """Explicit user cancellation."""
    pass
