"""Scan capability boundary and an in-process queue-backed implementation."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import AsyncIterator, Iterable, List, Optional, Union

from ..types import CameraFacing, ScanDevice, ScannerUnavailableError


logger = logging.getLogger(__name__)

CAMERA_UNAVAILABLE_ADVISORY = (
    "Could not access camera. Please ensure permissions are granted and a camera is available."
)
CAMERA_FAILED_ADVISORY = "Failed to access camera. Please ensure permissions are granted."


class ScanSessionController(ABC):
    """Owns camera enumeration, selection and start/stop of scanning.

    Implementations hand decoded strings to the workflow and know nothing
    about payment state.
    """

    facing: CameraFacing = CameraFacing.ENVIRONMENT

    @abstractmethod
    async def list_devices(self) -> List[ScanDevice]:
        """Enumerate video inputs.

        Raises:
            ScannerUnavailableError: no camera found or permission denied
        """
        raise NotImplementedError

    @abstractmethod
    def start(self, facing: Optional[CameraFacing] = None) -> AsyncIterator[str]:
        """Start the camera and stream decoded strings until stopped."""
        raise NotImplementedError

    @abstractmethod
    async def stop(self) -> None:
        """Stop the camera. Safe to call when not scanning."""
        raise NotImplementedError

    def switch_facing(self) -> CameraFacing:
        """Toggle between rear and front camera."""
        self.facing = self.facing.flipped()
        logger.info(f"Camera facing switched to {self.facing.value}")
        return self.facing


_STOP = object()


class QueuedScanSession(ScanSessionController):
    """Scan capability fed from outside through ``push``.

    Used by hosts whose decoder runs elsewhere (a browser, a device daemon)
    and forwards results into the process.

    Example:
        scanner = QueuedScanSession()
        scanner.push('{"userId": "u1", ...}')
    """

    def __init__(
        self,
        devices: Optional[Iterable[ScanDevice]] = None,
        facing: CameraFacing = CameraFacing.ENVIRONMENT
    ):
        if devices is None:
            devices = [ScanDevice(device_id="default", label="Rear camera", facing=CameraFacing.ENVIRONMENT)]
        self._devices = list(devices)
        self.facing = facing
        self.active = False
        self._queue: "asyncio.Queue[Union[str, BaseException, object]]" = asyncio.Queue()

    async def list_devices(self) -> List[ScanDevice]:
        if not self._devices:
            raise ScannerUnavailableError("No cameras found")
        return list(self._devices)

    def push(self, raw: str) -> None:
        """Deliver one decoded string."""
        self._queue.put_nowait(raw)

    def fail(self, error: BaseException) -> None:
        """Deliver a camera failure; it is raised from the stream."""
        self._queue.put_nowait(error)

    def start(self, facing: Optional[CameraFacing] = None) -> AsyncIterator[str]:
        """Begin a session; queued strings are delivered in push order.

        Raises:
            ScannerUnavailableError: no camera available
        """
        if not self._devices:
            raise ScannerUnavailableError("No cameras found")
        if facing is not None:
            self.facing = facing

        self.active = True
        logger.info(f"Scanning started ({self.facing.value} camera)")
        return self._stream()

    async def _stream(self) -> AsyncIterator[str]:
        try:
            while True:
                item = await self._queue.get()
                if item is _STOP:
                    break
                if isinstance(item, BaseException):
                    raise item
                yield item
        finally:
            self.active = False
            # Whatever is still queued belongs to the session that just ended.
            self._discard_pending()

    def _discard_pending(self) -> None:
        while not self._queue.empty():
            self._queue.get_nowait()

    async def stop(self) -> None:
        """Ends the stream after every string already pushed is delivered."""
        if not self.active:
            return
        self._queue.put_nowait(_STOP)
        logger.info("Scanning stopped")
