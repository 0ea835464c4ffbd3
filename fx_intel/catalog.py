"""Entrypoints exposed by the agent and their default prices."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class Entrypoint:
    key: str
    description: str
    default_price: int


ENTRYPOINTS: Tuple[Entrypoint, ...] = (
    Entrypoint(
        "overview",
        "Free FX overview - supported currencies and sample rates (try before you buy)",
        0,
    ),
    Entrypoint("convert", "Convert amount between currencies (live ECB rates)", 1000),
    Entrypoint("rates", "Get current exchange rates for a base currency", 2000),
    Entrypoint("historical", "Get historical exchange rate for a specific date", 2000),
    Entrypoint(
        "timeseries",
        "Get historical rates over a date range (for volatility/trend analysis)",
        3000,
    ),
    Entrypoint(
        "report",
        "Comprehensive FX report - current rates, 30-day trends, volatility for major pairs",
        5000,
    ),
    Entrypoint("analytics", "Payment analytics summary", 0),
    Entrypoint("analytics-transactions", "Recent payment transactions", 0),
    Entrypoint("analytics-csv", "Export payment data as CSV", 0),
)

ENTRYPOINTS_BY_KEY: Dict[str, Entrypoint] = {entry.key: entry for entry in ENTRYPOINTS}


def get_entrypoint(key: str) -> Entrypoint:
    try:
        return ENTRYPOINTS_BY_KEY[key]
    except KeyError as exc:
        raise KeyError(f"Unknown entrypoint '{key}'") from exc
