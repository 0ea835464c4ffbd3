"""Smoke tests for health endpoints."""

from __future__ import annotations


def test_health_endpoint_returns_ok(client):
    response = client.get("/health")
    assert response.status_code == 200
    payload = response.get_json()
    assert payload["status"] == "ok"
    assert payload["app"] == "fx-intel"
    assert payload["paymentsEnabled"] is False
    assert payload["analyticsEnabled"] is True


def test_health_reflects_payment_settings(make_app):
    app = make_app(PAYMENTS_ENABLED=True, ANALYTICS_ENABLED=False)

    with app.test_client() as client:
        payload = client.get("/health").get_json()

    assert payload["paymentsEnabled"] is True
    assert payload["analyticsEnabled"] is False
