"""Scan capability boundary for scan_pay."""

from .session import (
    ScanSessionController,
    QueuedScanSession,
    CAMERA_UNAVAILABLE_ADVISORY,
    CAMERA_FAILED_ADVISORY
)

__all__ = [
    "ScanSessionController",
    "QueuedScanSession",
    "CAMERA_UNAVAILABLE_ADVISORY",
    "CAMERA_FAILED_ADVISORY"
]
