"""Shared pytest fixtures for scan_pay tests."""

import json
from decimal import Decimal

import httpx
import pytest
import pytest_asyncio

from scan_pay.core import ScanPayBackendClient
from scan_pay.scanner import QueuedScanSession
from scan_pay.types import (
    PaymentIntent,
    ScanPayConfig,
    SessionCredential,
    TransactionRequest
)


API_BASE_URL = "https://ledger.test"


@pytest.fixture
def payment_payload():
    """Payer code as produced by the payer app."""
    return {
        "userId": "u1",
        "name": "Jane",
        "email": "jane@x.com",
        "accountNumber": "001",
        "transactionType": "payment",
    }


@pytest.fixture
def payment_payload_raw(payment_payload):
    return json.dumps(payment_payload)


@pytest.fixture
def sample_intent():
    return PaymentIntent(
        payer_id="u1",
        payer_name="Jane",
        payer_email="jane@x.com",
        account_number="001",
        currency_code="NGN",
    )


@pytest.fixture
def credential():
    return SessionCredential(token="agent-token-123")


@pytest.fixture
def config():
    return ScanPayConfig(api_base_url=API_BASE_URL)


@pytest.fixture
def sample_request(sample_intent):
    return TransactionRequest(
        intent=sample_intent,
        amount=Decimal("500"),
        fee=Decimal("25"),
        pin="1234",
        idempotency_marker="marker-1",
    )


class FakeLedger:
    """In-memory stand-in for the charges and transfer endpoints."""

    def __init__(self, charges=None, transfer_status=200, transfer_body=None):
        self.charges = charges if charges is not None else []
        self.charges_status = 200
        self.transfer_status = transfer_status
        self.transfer_body = transfer_body if transfer_body is not None else {
            "transactionId": "T1",
            "message": "ok",
        }
        self.requests = []

    @property
    def transfer_requests(self):
        return [r for r in self.requests if r.url.path.endswith("/transfertoagent")]

    @property
    def charge_requests(self):
        return [r for r in self.requests if r.url.path.endswith("/getallcharges")]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/getallcharges"):
            return httpx.Response(self.charges_status, json=self.charges)
        if request.url.path.endswith("/transfertoagent"):
            return httpx.Response(self.transfer_status, json=self.transfer_body)
        return httpx.Response(404, json={"message": "Not found"})


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest_asyncio.fixture
async def backend(config, ledger):
    """Backend client wired to the fake ledger."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(ledger.handler))
    client = ScanPayBackendClient(config, http_client=http_client)
    yield client
    await http_client.aclose()


@pytest.fixture
def scanner():
    return QueuedScanSession()
