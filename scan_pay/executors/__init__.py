"""Workflow executors for scan_pay."""

from .orchestrator import TransactionOrchestrator, PaymentSession

__all__ = [
    "TransactionOrchestrator",
    "PaymentSession"
]
