"""Pure transition function for the transaction state machine."""

from ..types import (
    TransactionState,
    StateError,
    WorkflowEvent,
    ScanStarted,
    ScanDecoded,
    ScanFailed,
    AmountConfirmed,
    PinSubmitted,
    SubmissionResult,
    RetryReady,
    Cancelled
)


S = TransactionState


def transition(state: TransactionState, event: WorkflowEvent) -> TransactionState:
    """Returns the state reached by applying ``event`` in ``state``.

    The only way into SUBMITTING is a PinSubmitted event in
    AWAITING_AUTHORIZATION, so a new request always needs a fresh PIN entry.

    Raises:
        StateError: event is not permitted in ``state``
    """
    if isinstance(event, Cancelled):
        if not state.cancellable:
            raise StateError("Cannot cancel while a submission is outstanding")
        return S.IDLE

    if isinstance(event, ScanStarted):
        if state in (S.IDLE, S.SUCCEEDED):
            return S.SCANNING

    elif isinstance(event, ScanDecoded):
        if state is S.SCANNING:
            return S.AWAITING_CONFIRMATION if event.accepted else S.IDLE

    elif isinstance(event, ScanFailed):
        if state is S.SCANNING:
            return S.IDLE

    elif isinstance(event, AmountConfirmed):
        if state in (S.AWAITING_CONFIRMATION, S.AWAITING_AUTHORIZATION):
            return S.AWAITING_AUTHORIZATION

    elif isinstance(event, PinSubmitted):
        if state is S.AWAITING_AUTHORIZATION:
            return S.SUBMITTING

    elif isinstance(event, SubmissionResult):
        if state is S.SUBMITTING:
            return S.SUCCEEDED if event.result.succeeded else S.FAILED

    elif isinstance(event, RetryReady):
        if state is S.FAILED:
            return S.IDLE if event.category.requires_rescan else S.AWAITING_AUTHORIZATION

    raise StateError(f"{type(event).__name__} not permitted in state {state.value}")
