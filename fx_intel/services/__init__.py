"""Service layer modules."""

from .fx_conversion import convert_amount, parse_symbols, round_percent, round_rate
from .rate_stats import SymbolReport, SymbolStats, compute_report_stats, compute_symbol_stats

__all__ = [
    "SymbolReport",
    "SymbolStats",
    "compute_report_stats",
    "compute_symbol_stats",
    "convert_amount",
    "parse_symbols",
    "round_percent",
    "round_rate",
]
