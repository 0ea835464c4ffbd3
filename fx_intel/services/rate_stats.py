"""Summary statistics over a rate series.

Each symbol is summarised independently over the dates on which it has an
observed rate. Arithmetic runs on unrounded ``Decimal`` values; rounding to
four places (rates) or two places (percentages) happens once, when a value is
placed in the result.

``change`` is undefined when the first observation is zero and ``volatility``
is undefined when the average is zero. Both are reported as ``None`` in that
case while the remaining statistics for the symbol are still produced.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal, localcontext
from typing import Any, Dict, List, Optional

from fx_intel.services.fx_conversion import (
    get_decimal_context,
    is_observed_rate,
    round_percent,
    round_rate,
    to_decimal,
)

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class SymbolStats:
    """Rounded min/max/average/percent change for one symbol."""

    min: Decimal
    max: Decimal
    avg: Decimal
    change: Optional[Decimal]


@dataclass(frozen=True)
class SymbolReport:
    """Report-window statistics for one symbol, including volatility."""

    current: Optional[Decimal]
    min: Decimal
    max: Decimal
    avg: Decimal
    change: Optional[Decimal]
    volatility: Optional[Decimal]


@dataclass(frozen=True)
class _RawStats:
    min: Decimal
    max: Decimal
    avg: Decimal
    first: Decimal
    last: Decimal

    def change_pct(self) -> Optional[Decimal]:
        if self.first == 0:
            return None
        with localcontext(get_decimal_context()):
            return (self.last - self.first) / self.first * HUNDRED

    def volatility_pct(self) -> Optional[Decimal]:
        if self.avg == 0:
            return None
        with localcontext(get_decimal_context()):
            return (self.max - self.min) / self.avg * HUNDRED


def observed_values(snapshots: Iterable[Mapping[str, Any]], symbol: str) -> List[Decimal]:
    """Return the symbol's rates in date order, skipping dates without one."""

    values: List[Decimal] = []
    for snapshot in snapshots:
        value = snapshot.get(symbol)
        if is_observed_rate(value):
            values.append(to_decimal(value))
    return values


def _raw_stats(values: Sequence[Decimal]) -> _RawStats:
    with localcontext(get_decimal_context()):
        avg = sum(values, Decimal("0")) / len(values)
    return _RawStats(
        min=min(values),
        max=max(values),
        avg=avg,
        first=values[0],
        last=values[-1],
    )


def _optional(value: Optional[Decimal], rounder) -> Optional[Decimal]:
    return None if value is None else rounder(value)


def compute_symbol_stats(
    snapshots: Sequence[Mapping[str, Any]],
    symbols: Iterable[str],
) -> Dict[str, SymbolStats]:
    """Summarise each symbol across ``snapshots`` (ordered by date ascending).

    Symbols that never appear with an observed rate are omitted from the
    result rather than reported as errors.
    """

    results: Dict[str, SymbolStats] = {}
    for symbol in symbols:
        values = observed_values(snapshots, symbol)
        if not values:
            continue
        raw = _raw_stats(values)
        results[symbol] = SymbolStats(
            min=round_rate(raw.min),
            max=round_rate(raw.max),
            avg=round_rate(raw.avg),
            change=_optional(raw.change_pct(), round_percent),
        )
    return results


def compute_report_stats(
    snapshots: Sequence[Mapping[str, Any]],
    symbols: Iterable[str],
    current_rates: Mapping[str, Any],
) -> Dict[str, SymbolReport]:
    """Like :func:`compute_symbol_stats`, adding volatility and the current rate.

    ``current_rates`` is a separately fetched latest snapshot at the same base.
    A symbol missing from it gets ``current=None``.
    """

    results: Dict[str, SymbolReport] = {}
    for symbol in symbols:
        values = observed_values(snapshots, symbol)
        if not values:
            continue
        raw = _raw_stats(values)
        current = current_rates.get(symbol)
        results[symbol] = SymbolReport(
            current=round_rate(current) if is_observed_rate(current) else None,
            min=round_rate(raw.min),
            max=round_rate(raw.max),
            avg=round_rate(raw.avg),
            change=_optional(raw.change_pct(), round_percent),
            volatility=_optional(raw.volatility_pct(), round_percent),
        )
    return results
