"""Transaction orchestrator: scan → confirm → authorize → submit → result."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, List, Optional

from ..core import (
    FeeResolver,
    ScanPayBackendClient,
    classify,
    new_idempotency_marker,
    normalize,
    transition
)
from ..scanner import (
    CAMERA_FAILED_ADVISORY,
    CAMERA_UNAVAILABLE_ADVISORY,
    ScanSessionController
)
from ..types import (
    AmountConfirmed,
    Cancelled,
    CameraFacing,
    ClassifiedError,
    PayloadError,
    PaymentIntent,
    PinSubmitted,
    RetryReady,
    ScanDevice,
    ScanDecoded,
    ScanFailed,
    ScanPayConfig,
    ScanStarted,
    SessionCredential,
    StateError,
    SubmissionResult,
    TransactionRequest,
    TransactionResult,
    TransactionState,
    TransactionView,
    TransferRejectedError,
    ValidationError,
    WorkflowEvent
)


logger = logging.getLogger(__name__)

NO_FEE = Decimal(0)


class PaymentSession:
    """Everything held for one scanned intent; discarded on cancel or rescan."""

    def __init__(self, intent: PaymentIntent):
        self.intent = intent
        self.fee: Optional[Decimal] = None
        self.fee_pending = False
        self.amount: Optional[Decimal] = None
        self.description: Optional[str] = None
        self.pin: Optional[str] = None
        self.marker: Optional[str] = None


class TransactionOrchestrator:
    """Sole owner of intent, fee, amount and request state.

    Drives the workflow through ``transition`` and performs the side effects
    around each event: normalizing scans, resolving the fee, issuing the
    single transfer call and classifying its failure.

    Example:
        orchestrator = TransactionOrchestrator(backend, credential, scanner)
        await orchestrator.refresh_devices()
        await orchestrator.scan()
        await orchestrator.confirm_amount("500")
        await orchestrator.submit_pin("1234")
        view = orchestrator.view()
    """

    def __init__(
        self,
        backend: ScanPayBackendClient,
        credential: SessionCredential,
        scanner: Optional[ScanSessionController] = None,
        config: Optional[ScanPayConfig] = None,
        fee_resolver: Optional[FeeResolver] = None,
        classifier: Callable[[Any], ClassifiedError] = classify,
    ):
        """Initialize orchestrator.

        Args:
            backend: Client for the charges and transfer endpoints
            credential: Agent session credential, passed to every remote call
            scanner: Scan capability; without one, decodes must be fed to on_decoded
            config: Workflow configuration (defaults to the backend's)
            fee_resolver: Fee lookup (defaults to one built on ``backend``)
            classifier: Failure classifier
        """
        self.backend = backend
        self.credential = credential
        self.scanner = scanner
        self.config = config or backend.config
        self.fee_resolver = fee_resolver or FeeResolver(backend, self.config)
        self._classify = classifier

        self.state = TransactionState.IDLE
        self.error: Optional[ClassifiedError] = None
        self.result: Optional[TransactionResult] = None
        self.advisory: Optional[str] = None
        self.scanning_available = True
        self.devices: List[ScanDevice] = []
        self._session: Optional[PaymentSession] = None
        self._closed = False

    @property
    def intent(self) -> Optional[PaymentIntent]:
        return self._session.intent if self._session else None

    @property
    def amount(self) -> Optional[Decimal]:
        return self._session.amount if self._session else None

    @property
    def fee(self) -> Optional[Decimal]:
        return self._session.fee if self._session else None

    def _apply(self, event: WorkflowEvent) -> TransactionState:
        previous = self.state
        self.state = transition(previous, event)
        logger.info(f"{type(event).__name__}: {previous.value} -> {self.state.value}")
        return self.state

    # Scanning

    async def refresh_devices(self) -> bool:
        """Enumerate cameras; failure only disables scanning."""
        if self.scanner is None:
            self.scanning_available = False
            self.advisory = CAMERA_UNAVAILABLE_ADVISORY
            return False
        try:
            self.devices = await self.scanner.list_devices()
        except Exception as e:
            logger.warning(f"Camera enumeration failed: {e}")
            self.devices = []
            self.scanning_available = False
            self.advisory = CAMERA_UNAVAILABLE_ADVISORY
            return False

        self.scanning_available = True
        self.advisory = None
        return True

    def start_scan(self) -> bool:
        """Enter SCANNING, discarding the previous session.

        Returns:
            False (with an advisory) when no camera is usable

        Raises:
            StateError: a payment is already in progress
        """
        if not self.scanning_available:
            logger.warning("Scan requested while scanning is unavailable")
            self.advisory = self.advisory or CAMERA_UNAVAILABLE_ADVISORY
            return False

        self._apply(ScanStarted())
        self._session = None
        self.error = None
        self.result = None
        return True

    async def scan(self) -> Optional[PaymentIntent]:
        """Run the scanner until the first decode is accepted or rejected.

        Returns:
            The accepted intent, or None
        """
        if self.scanner is None:
            raise StateError("No scan capability configured")
        if not self.start_scan():
            return None

        stream = None
        try:
            stream = self.scanner.start(self.scanner.facing)
            async for raw in stream:
                await self.on_decoded(raw)
                if self.state is not TransactionState.SCANNING:
                    break
        except Exception as e:
            logger.error(f"Scanner failed: {e}", exc_info=True)
            self.scan_failed(str(e))
        finally:
            await self.scanner.stop()
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()
        return self.intent

    async def on_decoded(self, raw: Any) -> bool:
        """Feed one decoded string; only the first one while SCANNING counts."""
        if self._closed or self.state is not TransactionState.SCANNING:
            logger.debug(f"Ignoring decode received in state {self.state.value}")
            return False

        try:
            intent = normalize(raw)
        except PayloadError as e:
            classified = self._classify(e)
            logger.warning(f"Scanned payload rejected: {classified.category.value}")
            self._apply(ScanDecoded(error=classified))
            self.error = classified
            await self._stop_scanner()
            return False

        self._session = PaymentSession(intent)
        self.error = None
        self._apply(ScanDecoded(intent=intent))
        logger.info(f"Accepted payment code for payer {intent.payer_id}")
        await self._stop_scanner()
        return True

    def scan_failed(self, reason: str = "") -> None:
        """Camera failed mid-scan: back to IDLE with an advisory."""
        if self.state is not TransactionState.SCANNING:
            return
        self._apply(ScanFailed(reason=reason))
        self.advisory = CAMERA_FAILED_ADVISORY

    def switch_facing(self) -> Optional[CameraFacing]:
        if self.scanner is None:
            return None
        return self.scanner.switch_facing()

    async def _stop_scanner(self) -> None:
        if self.scanner is not None:
            await self.scanner.stop()

    # Confirmation and authorization

    async def confirm_amount(self, amount: Any, description: Optional[str] = None) -> TransactionState:
        """Confirm (or revise) the amount; resolves the fee once per session.

        Raises:
            ValidationError: amount is not a positive number
            StateError: no intent awaiting confirmation
        """
        if self.state not in (
            TransactionState.AWAITING_CONFIRMATION,
            TransactionState.AWAITING_AUTHORIZATION,
        ):
            raise StateError(f"Cannot confirm an amount in state {self.state.value}")

        value = self._parse_amount(amount)
        session = self._session
        if session.fee_pending:
            logger.warning("Amount confirmation ignored: fee lookup already in progress")
            return self.state

        if session.fee is None:
            session.fee_pending = True
            try:
                fee = await self.fee_resolver.resolve_fee(self.credential)
            except Exception as e:
                logger.error(f"Fee resolver raised: {e}", exc_info=True)
                fee = NO_FEE
            finally:
                session.fee_pending = False

            if self._closed or self._session is not session:
                logger.info("Discarding fee resolved for an abandoned session")
                return self.state
            session.fee = fee

        if session.amount != value:
            session.marker = None
        session.amount = value
        session.description = description.strip() if description and description.strip() else None
        self.error = None
        return self._apply(AmountConfirmed(amount=value, description=session.description))

    async def submit_pin(self, pin: str) -> TransactionState:
        """Build the request and issue exactly one transfer call.

        A call while a submission is outstanding is a no-op.

        Raises:
            ValidationError: PIN is not exactly ``pin_length`` symbols
            StateError: not awaiting authorization
        """
        if self.state is TransactionState.SUBMITTING:
            logger.warning("Duplicate PIN submission ignored: transfer already in flight")
            return self.state
        if self.state is not TransactionState.AWAITING_AUTHORIZATION:
            raise StateError(f"Cannot submit a PIN in state {self.state.value}")
        if not isinstance(pin, str) or len(pin) != self.config.pin_length:
            raise ValidationError(f"PIN must be exactly {self.config.pin_length} digits")

        session = self._session
        session.marker = session.marker or new_idempotency_marker()
        request = TransactionRequest(
            intent=session.intent,
            amount=session.amount,
            fee=session.fee,
            pin=pin,
            idempotency_marker=session.marker,
        )
        session.pin = pin
        self.error = None
        self._apply(PinSubmitted(pin=pin))

        try:
            response = await self.backend.submit_transfer(request, self.credential)
        except Exception as e:
            answered = isinstance(e, TransferRejectedError)
            classified = self._classify(e)
            logger.warning(
                f"Transfer failed ({classified.category.value}) for marker {request.idempotency_marker}"
            )
            result = TransactionResult(
                succeeded=False,
                classified_error=classified,
                amount=request.amount,
                fee=request.fee,
            )
        else:
            answered = True
            result = TransactionResult(
                succeeded=True,
                transaction_id=response.transaction_id,
                amount=request.amount,
                fee=request.fee,
            )

        if self._closed:
            logger.info(f"Orchestrator closed; transfer result for {request.idempotency_marker} not applied")
            return self.state

        self._finish(session, result, answered)
        return self.state

    def _finish(self, session: PaymentSession, result: TransactionResult, answered: bool = True) -> None:
        session.pin = None
        self.result = result
        self._apply(SubmissionResult(result=result))

        if result.succeeded:
            session.marker = None
            logger.info(f"Transfer succeeded: transaction {result.transaction_id}")
            return

        classified = result.classified_error
        self.error = classified
        # Without a backend answer the transfer may have been applied; retry under the same marker.
        if answered:
            session.marker = None
        self._apply(RetryReady(category=classified.category))
        if self.state is TransactionState.IDLE:
            self._session = None

    # Cancellation and teardown

    async def cancel(self) -> None:
        """Return to IDLE and discard intent, fee, amount and PIN.

        Raises:
            StateError: a submission is outstanding
        """
        was_scanning = self.state is TransactionState.SCANNING
        self._apply(Cancelled())
        self._session = None
        self.error = None
        self.result = None
        if was_scanning:
            await self._stop_scanner()

    async def close(self) -> None:
        """Host is gone: stop scanning and ignore any late results."""
        self._closed = True
        await self._stop_scanner()

    def view(self) -> TransactionView:
        session = self._session
        amount = session.amount if session else None
        fee = session.fee if session else None
        return TransactionView(
            state=self.state,
            intent=session.intent if session else None,
            amount=amount,
            fee=fee,
            total=amount + fee if amount is not None and fee is not None else None,
            description=session.description if session else None,
            pin_entered=bool(session and session.pin),
            error=self.error,
            result=self.result,
            advisory=self.advisory,
            scanning_available=self.scanning_available,
            devices=list(self.devices),
            facing=self.scanner.facing if self.scanner else CameraFacing.ENVIRONMENT,
        )

    @staticmethod
    def _parse_amount(amount: Any) -> Decimal:
        if isinstance(amount, bool) or amount is None:
            raise ValidationError("Amount must be a number greater than zero")
        try:
            value = Decimal(str(amount).strip())
        except InvalidOperation as e:
            raise ValidationError("Amount must be a number greater than zero") from e
        if not value.is_finite() or value <= 0:
            raise ValidationError("Amount must be a number greater than zero")
        return value
