"""Tests for entrypoint pricing and the payment gate."""

from __future__ import annotations

import base64
import json

import pytest
import responses

from fx_intel.analytics import INCOMING, InMemoryPaymentTracker
from fx_intel.payments import (
    PaymentReceipt,
    PaymentRejected,
    PaymentRequest,
    PricingTable,
    parse_price_overrides,
)

UPSTREAM = "https://frankfurter.test/v1"
LATEST = {"amount": 1.0, "base": "USD", "date": "2025-06-13", "rates": {"EUR": 0.9}}
CONVERT_INPUT = {"input": {"from": "USD", "to": "EUR", "amount": 100}}


class RecordingSettlement:
    """Settlement hook that accepts any header except ``bad``."""

    def __init__(self) -> None:
        self.verified: list[PaymentRequest] = []
        self.settled: list[PaymentRequest] = []

    def verify(self, request: PaymentRequest) -> None:
        if request.payment_header == "bad":
            raise PaymentRejected("signature mismatch")
        self.verified.append(request)

    def settle(self, request: PaymentRequest) -> PaymentReceipt:
        self.settled.append(request)
        return PaymentReceipt(transaction="0xfeed", payer="0xpayer", network="base")


@pytest.fixture()
def settlement() -> RecordingSettlement:
    return RecordingSettlement()


@pytest.fixture()
def tracker() -> InMemoryPaymentTracker:
    return InMemoryPaymentTracker()


@pytest.fixture()
def paid_client(make_app, settlement, tracker):
    app = make_app(
        PAYMENTS_ENABLED=True,
        PAYMENTS_PAY_TO="0xmerchant",
        settlement=settlement,
        tracker=tracker,
    )
    with app.test_client() as client:
        yield client


def test_parse_price_overrides_accepts_string_and_mapping():
    assert parse_price_overrides("convert=1500, report=0") == {"convert": 1500, "report": 0}
    assert parse_price_overrides({"rates": "250"}) == {"rates": 250}
    assert parse_price_overrides("") == {}


@pytest.mark.parametrize("raw", ["convert", "unknown=10", "convert=-1", "convert=abc"])
def test_parse_price_overrides_rejects_invalid(raw):
    with pytest.raises((KeyError, ValueError)):
        parse_price_overrides(raw)


def test_pricing_table_applies_overrides():
    pricing = PricingTable.from_config({"ENTRYPOINT_PRICE_OVERRIDES": "convert=1500"})

    assert pricing.amount_for("convert") == 1500
    assert pricing.amount_for("rates") == 2000
    assert pricing.is_free("overview")
    assert not pricing.is_free("report")


def test_paid_entrypoint_without_header_requires_payment(paid_client, settlement):
    response = paid_client.post("/entrypoints/convert/invoke", json=CONVERT_INPUT)

    assert response.status_code == 402
    payload = response.get_json()
    assert payload["accepts"] == [
        {
            "entrypoint": "convert",
            "amount": "1000",
            "currency": "USDC",
            "network": "base",
            "payTo": "0xmerchant",
        }
    ]
    assert settlement.verified == []


def test_invalid_input_is_rejected_before_payment(paid_client):
    response = paid_client.post(
        "/entrypoints/convert/invoke", json={"input": {"from": "USD", "to": "USD", "amount": 1}}
    )

    assert response.status_code == 422


def test_free_entrypoint_needs_no_payment(paid_client):
    response = paid_client.post("/entrypoints/analytics/invoke", json={})

    assert response.status_code == 200
    assert "X-PAYMENT-RESPONSE" not in response.headers


def test_rejected_payment_returns_402(paid_client, settlement):
    response = paid_client.post(
        "/entrypoints/convert/invoke", json=CONVERT_INPUT, headers={"X-PAYMENT": "bad"}
    )

    assert response.status_code == 402
    assert "signature mismatch" in response.get_json()["message"]
    assert settlement.settled == []


@responses.activate
def test_paid_call_settles_after_success(paid_client, settlement, tracker):
    responses.add(responses.GET, f"{UPSTREAM}/latest", json=LATEST, status=200)

    response = paid_client.post(
        "/entrypoints/convert/invoke", json=CONVERT_INPUT, headers={"X-PAYMENT": "signed"}
    )

    assert response.status_code == 200
    assert response.get_json()["output"]["converted"] == 90.0
    assert [request.amount for request in settlement.settled] == [1000]

    receipt = json.loads(base64.b64decode(response.headers["X-PAYMENT-RESPONSE"]))
    assert receipt == {
        "success": True,
        "transaction": "0xfeed",
        "payer": "0xpayer",
        "network": "base",
    }

    (record,) = tracker.transactions()
    assert record.direction == INCOMING
    assert record.amount == 1000
    assert record.entrypoint == "convert"
    assert record.transaction == "0xfeed"


@responses.activate
def test_failed_call_is_not_settled(paid_client, settlement, tracker):
    responses.add(responses.GET, f"{UPSTREAM}/latest", status=500)

    response = paid_client.post(
        "/entrypoints/convert/invoke", json=CONVERT_INPUT, headers={"X-PAYMENT": "signed"}
    )

    assert response.status_code == 502
    assert len(settlement.verified) == 1
    assert settlement.settled == []
    assert tracker.transactions() == []
    assert "X-PAYMENT-RESPONSE" not in response.headers


def test_missing_settlement_hook_is_unavailable(make_app):
    app = make_app(PAYMENTS_ENABLED=True)

    with app.test_client() as client:
        response = client.post(
            "/entrypoints/convert/invoke", json=CONVERT_INPUT, headers={"X-PAYMENT": "signed"}
        )

    assert response.status_code == 503


def test_price_override_makes_entrypoint_free(make_app):
    app = make_app(PAYMENTS_ENABLED=True, ENTRYPOINT_PRICE_OVERRIDES="rates=0")

    with app.test_client() as client, responses.RequestsMock() as rsps:
        rsps.add(rsps.GET, f"{UPSTREAM}/latest", json=LATEST, status=200)
        response = client.post("/entrypoints/rates/invoke", json={})

    assert response.status_code == 200
