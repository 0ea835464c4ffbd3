"""Services behind the rate entrypoints (overview, convert, rates, ...)."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from fx_intel.context import AgentContext
from fx_intel.errors import UpstreamError, ValidationError
from fx_intel.logging import current_request_id
from fx_intel.services.fanout import gather
from fx_intel.services.fx_conversion import convert_amount, is_observed_rate
from fx_intel.services.rate_stats import (
    SymbolReport,
    SymbolStats,
    compute_report_stats,
    compute_symbol_stats,
)
from fx_intel.upstream import FrankfurterAPIError, RateSeries, RateSnapshot
from fx_intel.utils.datetime import utc_now

logger = logging.getLogger(__name__)

SOURCE = "ECB"
SOURCE_LONG = "European Central Bank (ECB)"
DEFAULT_BASE = "USD"
SAMPLE_SYMBOLS = ("EUR", "GBP", "JPY", "CHF")


@dataclass(frozen=True)
class OverviewResult:
    currencies: Dict[str, str]
    sample: RateSnapshot
    fetched_at: datetime


@dataclass(frozen=True)
class ConversionResult:
    source_currency: str
    target_currency: str
    amount: float
    rate: float
    converted: Decimal
    date: date


@dataclass(frozen=True)
class TimeseriesResult:
    series: RateSeries
    stats: Dict[str, SymbolStats]


@dataclass(frozen=True)
class ReportResult:
    base: str
    latest: RateSnapshot
    available_currencies: int
    analysis: Dict[str, SymbolReport]
    period_start: date
    period_end: date
    generated_at: datetime


@contextmanager
def upstream_errors() -> Iterator[None]:
    """Translate upstream client failures into a 502 API error."""

    try:
        yield
    except FrankfurterAPIError as exc:
        payload = {"upstream_status": exc.status_code} if exc.status_code else {}
        raise UpstreamError(str(exc), payload=payload) from exc
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        logger.warning("Malformed upstream payload: %s", exc)
        raise UpstreamError(f"Malformed upstream payload: {exc}") from exc


def build_overview(ctx: AgentContext) -> OverviewResult:
    request_id = current_request_id()
    with upstream_errors():
        currencies, latest = gather(
            lambda: ctx.client.currencies(request_id=request_id),
            lambda: ctx.client.latest(DEFAULT_BASE, request_id=request_id),
            max_workers=ctx.fanout_workers,
        )

    sample_rates = {
        symbol: latest.rates[symbol] for symbol in SAMPLE_SYMBOLS if symbol in latest.rates
    }
    return OverviewResult(
        currencies=currencies,
        sample=RateSnapshot(base=latest.base, date=latest.date, rates=sample_rates),
        fetched_at=utc_now(),
    )


def convert_currency(
    ctx: AgentContext, source: str, target: str, amount: float
) -> ConversionResult:
    """Convert ``amount`` of ``source`` into ``target`` at the latest rate."""

    if amount <= 0:
        raise ValidationError("'amount' must be greater than zero.", payload={"field": "amount"})
    if source == target:
        raise ValidationError("'from' and 'to' must differ.", payload={"field": "to"})

    with upstream_errors():
        snapshot = ctx.client.latest(source, [target], request_id=current_request_id())

    rate = snapshot.rates.get(target)
    if not is_observed_rate(rate):
        raise UpstreamError(f"Upstream returned no rate for {source}/{target}.")

    return ConversionResult(
        source_currency=source,
        target_currency=target,
        amount=amount,
        rate=rate,
        converted=convert_amount(amount, rate),
        date=snapshot.date,
    )


def latest_rates(ctx: AgentContext, base: str, symbols: Sequence[str] | None = None) -> RateSnapshot:
    with upstream_errors():
        return ctx.client.latest(base, symbols or None, request_id=current_request_id())


def historical_rates(
    ctx: AgentContext, on: date, base: str, symbols: Sequence[str] | None = None
) -> RateSnapshot:
    with upstream_errors():
        return ctx.client.historical(
            on, base, symbols or None, request_id=current_request_id()
        )


def rate_timeseries(
    ctx: AgentContext,
    start: date,
    end: date,
    base: str,
    symbols: Sequence[str],
) -> TimeseriesResult:
    """Fetch a date range and summarise each requested symbol."""

    if start > end:
        raise ValidationError(
            "'startDate' must not be after 'endDate'.", payload={"field": "startDate"}
        )
    if not symbols:
        raise ValidationError("'symbols' is required.", payload={"field": "symbols"})

    with upstream_errors():
        series = ctx.client.timeseries(
            start, end, base, symbols, request_id=current_request_id()
        )

    return TimeseriesResult(series=series, stats=compute_symbol_stats(series.snapshots, symbols))


def report_period(ctx: AgentContext, today: Optional[date] = None) -> tuple[date, date]:
    end = today or utc_now().date()
    return end - timedelta(days=ctx.report_window_days), end


def build_report(ctx: AgentContext, base: str) -> ReportResult:
    """Current rates plus window statistics and volatility for the major pairs."""

    start, end = report_period(ctx)
    symbols: List[str] = [symbol for symbol in ctx.report_symbols if symbol != base]
    request_id = current_request_id()

    with upstream_errors():
        currencies, latest, series = gather(
            lambda: ctx.client.currencies(request_id=request_id),
            lambda: ctx.client.latest(base, request_id=request_id),
            lambda: ctx.client.timeseries(start, end, base, symbols, request_id=request_id),
            max_workers=ctx.fanout_workers,
        )

    return ReportResult(
        base=base,
        latest=latest,
        available_currencies=len(currencies),
        analysis=compute_report_stats(series.snapshots, symbols, latest.rates),
        period_start=start,
        period_end=end,
        generated_at=utc_now(),
    )
