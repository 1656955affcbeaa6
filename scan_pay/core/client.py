"""HTTP client for the charges and transfer backend endpoints."""

import logging
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

from .classifier import extract_message
from ..types import (
    Charge,
    ScanPayConfig,
    SessionCredential,
    TransactionRequest,
    TransferRejectedError,
    TransferResponse
)


logger = logging.getLogger(__name__)

IDEMPOTENCY_HEADER = "Idempotency-Key"
DEFAULT_FAILURE_MESSAGE = "Transaction failed"


class ScanPayBackendClient:
    """Talks to the ledger backend on behalf of one agent session.

    The session credential is passed to every call; the client holds no
    authentication state of its own.

    Example:
        async with ScanPayBackendClient(ScanPayConfig.from_env()) as backend:
            charges = await backend.list_charges(credential)
    """

    def __init__(
        self,
        config: ScanPayConfig,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        """Initialize backend client.

        Args:
            config: Endpoint and timeout configuration
            http_client: Optional preconfigured client (closed by its owner)
        """
        self.config = config
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(timeout=config.request_timeout_seconds)
        self.default_headers = {"Content-Type": "application/json"}

    async def __aenter__(self) -> "ScanPayBackendClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def list_charges(self, credential: SessionCredential) -> List[Charge]:
        """Fetch every configured charge, active or not.

        Entries that do not describe a charge are skipped.

        Raises:
            httpx.HTTPError: transport failure or error status
            ValueError: response body is not a list of charges
        """
        response = await self.client.get(
            self.config.charges_url,
            headers={**self.default_headers, **credential.auth_headers()}
        )
        response.raise_for_status()

        data = response.json()
        if not isinstance(data, list):
            raise ValueError(f"Charges response is not a list: {type(data).__name__}")
        charges = []
        for index, entry in enumerate(data):
            try:
                charges.append(Charge.model_validate(entry))
            except ValidationError as e:
                logger.warning(f"Skipping invalid charge entry {index}: {e.error_count()} validation error(s)")
        return charges

    async def submit_transfer(
        self,
        request: TransactionRequest,
        credential: SessionCredential
    ) -> TransferResponse:
        """Issue the transfer call for a single request.

        Args:
            request: Frozen transaction request
            credential: Agent session credential

        Returns:
            TransferResponse for a successful transfer

        Raises:
            TransferRejectedError: backend reported a failure
            httpx.HTTPError: transport failure, no backend answer
        """
        logger.info(
            f"Submitting transfer from {request.intent.payer_id}: amount={request.amount} "
            f"fee={request.fee} marker={request.idempotency_marker}"
        )
        response = await self.client.post(
            self.config.transfer_url,
            json=request.to_wire(),
            headers={
                **self.default_headers,
                **credential.auth_headers(),
                IDEMPOTENCY_HEADER: request.idempotency_marker,
            }
        )
        body = _json_body(response)

        if response.is_error:
            raw_error = extract_message(body) or DEFAULT_FAILURE_MESSAGE
            logger.warning(f"Transfer rejected with HTTP {response.status_code}")
            raise TransferRejectedError(raw_error, status_code=response.status_code)

        if not isinstance(body, dict):
            logger.warning(f"Transfer accepted with HTTP {response.status_code} but no JSON body")
            return TransferResponse()

        if body.get("error") or body.get("success") is False:
            raise TransferRejectedError(
                extract_message(body) or DEFAULT_FAILURE_MESSAGE,
                status_code=response.status_code
            )

        try:
            return TransferResponse.model_validate(body)
        except ValidationError as e:
            # The transfer went through; only the receipt fields are unusable.
            logger.warning(f"Transfer accepted with HTTP {response.status_code} but unreadable body: {e}")
            return TransferResponse()


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None
