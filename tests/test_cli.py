"""Tests for the Flask CLI commands."""

from __future__ import annotations

import json
from datetime import UTC, datetime

import responses

from tests.fixtures import load_json

UPSTREAM = "https://frankfurter.test/v1"


def test_pricing_command_lists_every_entrypoint(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["fx-pricing"])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert len(lines) == 9
    assert lines[0].split() == ["overview", "free"]
    assert lines[5].split() == ["report", "5000", "USDC"]


@responses.activate
def test_report_command_prints_json(make_app, monkeypatch):
    monkeypatch.setattr(
        "fx_intel.services.rates.utc_now", lambda: datetime(2025, 6, 4, tzinfo=UTC)
    )
    app = make_app(REPORT_SYMBOLS="EUR,GBP", REPORT_WINDOW_DAYS=2)
    responses.add(
        responses.GET,
        f"{UPSTREAM}/currencies",
        json=load_json("frankfurter_currencies.json"),
        status=200,
    )
    responses.add(
        responses.GET,
        f"{UPSTREAM}/latest",
        json=load_json("frankfurter_latest_usd.json"),
        status=200,
    )
    responses.add(
        responses.GET,
        f"{UPSTREAM}/2025-06-02..2025-06-04",
        json=load_json("frankfurter_timeseries.json"),
        status=200,
    )

    result = app.test_cli_runner().invoke(args=["fx-report", "--base", "usd"])

    assert result.exit_code == 0, result.output
    report = json.loads(result.output)
    assert report["base"] == "USD"
    assert report["analysis30Day"]["EUR"]["volatility"] == 4.44


def test_report_command_rejects_bad_base(app):
    result = app.test_cli_runner().invoke(args=["fx-report", "--base", "dollars"])

    assert result.exit_code != 0
    assert "three letters" in result.output


@responses.activate
def test_report_command_surfaces_upstream_failure(app):
    responses.add(responses.GET, f"{UPSTREAM}/currencies", status=500)
    responses.add(responses.GET, f"{UPSTREAM}/latest", status=500)

    result = app.test_cli_runner().invoke(args=["fx-report"])

    assert result.exit_code == 1
    assert "Server error 500" in result.output
