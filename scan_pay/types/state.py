"""Workflow state definitions and scanner facing modes."""

from enum import Enum


class TransactionState(str, Enum):
    """States of the scan-to-pay authorization workflow"""
    IDLE = "idle"                                        # Nothing in progress
    SCANNING = "scanning"                                # Camera running, waiting for a decode
    AWAITING_CONFIRMATION = "awaiting-confirmation"      # Intent held, amount not yet confirmed
    AWAITING_AUTHORIZATION = "awaiting-authorization"    # Fee resolved, waiting for payer PIN
    SUBMITTING = "submitting"                            # Transfer call outstanding
    SUCCEEDED = "succeeded"                              # Transfer accepted by backend
    FAILED = "failed"                                    # Transfer rejected (transient)

    @property
    def cancellable(self) -> bool:
        """Cancellation is allowed everywhere except while a submission is outstanding."""
        return self is not TransactionState.SUBMITTING


class IntentKind(str, Enum):
    """Kinds of scanned code the workflow accepts"""
    PAYMENT = "payment"


class CameraFacing(str, Enum):
    """Camera selection passed to the scan capability"""
    ENVIRONMENT = "environment"    # Rear camera
    USER = "user"                  # Front camera

    def flipped(self) -> "CameraFacing":
        if self is CameraFacing.ENVIRONMENT:
            return CameraFacing.USER
        return CameraFacing.ENVIRONMENT
