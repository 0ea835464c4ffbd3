"""Tests for per-symbol rate statistics."""

from __future__ import annotations

from decimal import Decimal

import pytest

from fx_intel.services.fx_conversion import round_percent, round_rate
from fx_intel.services.rate_stats import (
    compute_report_stats,
    compute_symbol_stats,
    observed_values,
)

SNAPSHOTS = [
    {"EUR": 0.90, "GBP": 0.75},
    {"EUR": 0.92},
    {"EUR": 0.88, "GBP": 0.74},
]


def test_symbol_stats_cover_min_max_avg_and_change():
    stats = compute_symbol_stats(SNAPSHOTS, ["EUR"])

    eur = stats["EUR"]
    assert eur.min == Decimal("0.8800")
    assert eur.max == Decimal("0.9200")
    assert eur.avg == Decimal("0.9000")
    assert eur.change == Decimal("-2.22")


def test_symbol_stats_skip_dates_without_observation():
    stats = compute_symbol_stats(SNAPSHOTS, ["GBP"])

    gbp = stats["GBP"]
    assert gbp.min == Decimal("0.74")
    assert gbp.max == Decimal("0.75")
    assert gbp.avg == Decimal("0.745")
    assert gbp.change == Decimal("-1.33")


def test_symbol_without_observations_is_omitted():
    stats = compute_symbol_stats(SNAPSHOTS, ["EUR", "JPY"])

    assert set(stats) == {"EUR"}


def test_empty_series_yields_empty_result():
    assert compute_symbol_stats([], ["EUR"]) == {}


def test_single_observation_has_zero_change():
    stats = compute_symbol_stats([{"EUR": 0.9123}], ["EUR"])

    eur = stats["EUR"]
    assert eur.min == eur.max == eur.avg == Decimal("0.9123")
    assert eur.change == Decimal("0")


def test_zero_first_observation_leaves_change_undefined():
    stats = compute_symbol_stats([{"XAU": 0}, {"XAU": 1.5}], ["XAU"])

    xau = stats["XAU"]
    assert xau.change is None
    assert xau.min == Decimal("0")
    assert xau.max == Decimal("1.5")
    assert xau.avg == Decimal("0.75")


def test_null_and_nan_values_are_not_observations():
    snapshots = [{"EUR": None}, {"EUR": float("nan")}, {"EUR": 0.9}, {"EUR": True}]

    assert observed_values(snapshots, "EUR") == [Decimal("0.9")]


def test_rounding_happens_after_aggregation():
    # avg of unrounded values is 1.00005, which rounds up to 1.0001
    stats = compute_symbol_stats([{"X": 1.00004}, {"X": 1.00006}], ["X"])

    assert stats["X"].avg == Decimal("1.0001")
    assert stats["X"].min == Decimal("1.0000")
    assert stats["X"].max == Decimal("1.0001")


def test_stats_stay_within_bounds():
    snapshots = [{"JPY": value} for value in (151.2, 149.87, 150.01, 152.66, 150.5)]

    jpy = compute_symbol_stats(snapshots, ["JPY"])["JPY"]

    assert jpy.min <= jpy.avg <= jpy.max


def test_report_stats_add_current_and_volatility():
    report = compute_report_stats(SNAPSHOTS, ["EUR", "GBP"], {"EUR": 0.86714})

    eur = report["EUR"]
    assert eur.current == Decimal("0.8671")
    assert eur.change == Decimal("-2.22")
    assert eur.volatility == Decimal("4.44")

    gbp = report["GBP"]
    assert gbp.current is None
    assert gbp.volatility == Decimal("1.34")


def test_report_volatility_undefined_for_zero_average():
    report = compute_report_stats([{"X": 0}, {"X": 0}], ["X"], {"X": 0})

    x = report["X"]
    assert x.volatility is None
    assert x.change is None
    assert x.current == Decimal("0")


@pytest.mark.parametrize(
    ("first", "last", "sign"),
    [(0.9, 0.95, 1), (0.95, 0.9, -1), (0.9, 0.9, 0)],
)
def test_change_sign_follows_direction(first, last, sign):
    change = compute_symbol_stats([{"EUR": first}, {"EUR": last}], ["EUR"])["EUR"].change

    assert (change > 0) - (change < 0) == sign


def test_rounded_stats_are_stable_under_rounding():
    eur = compute_symbol_stats(SNAPSHOTS, ["EUR"])["EUR"]

    assert round_rate(eur.avg) == eur.avg
    assert round_percent(eur.change) == eur.change
