"""Tests for request correlation in the rate services."""

from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock

import pytest
from flask import g

from fx_intel.context import build_context
from fx_intel.services.rates import historical_rates, latest_rates, rate_timeseries
from fx_intel.upstream import RateSeries, RateSnapshot


@pytest.fixture()
def upstream() -> MagicMock:
    client = MagicMock()
    client.latest.return_value = RateSnapshot(base="USD", date=date(2025, 6, 13))
    client.historical.return_value = RateSnapshot(base="USD", date=date(2024, 1, 2))
    client.timeseries.return_value = RateSeries(
        base="USD", start_date=date(2025, 6, 2), end_date=date(2025, 6, 4)
    )
    return client


def test_single_fetch_services_forward_request_id(app, upstream):
    ctx = build_context(app.config, client=upstream)

    with app.test_request_context("/entrypoints/rates/invoke", method="POST"):
        g.request_id = "req-42"
        latest_rates(ctx, "USD", ["EUR"])
        historical_rates(ctx, date(2024, 1, 2), "USD")
        rate_timeseries(ctx, date(2025, 6, 2), date(2025, 6, 4), "USD", ["EUR"])

    assert upstream.latest.call_args.kwargs["request_id"] == "req-42"
    assert upstream.historical.call_args.kwargs["request_id"] == "req-42"
    assert upstream.timeseries.call_args.kwargs["request_id"] == "req-42"


def test_services_outside_a_request_send_no_request_id(app, upstream):
    ctx = build_context(app.config, client=upstream)

    with app.app_context():
        latest_rates(ctx, "USD")

    assert upstream.latest.call_args.kwargs["request_id"] is None
