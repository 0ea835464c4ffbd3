"""Shared utilities for FX amounts, rounding and currency code handling."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, getcontext, localcontext
from typing import Iterable, List

ROUNDING_PRECISION = 28
RATE_QUANTUM = Decimal("0.0001")
PERCENT_QUANTUM = Decimal("0.01")
AMOUNT_QUANTUM = Decimal("0.01")


def get_decimal_context():
    """Return the shared Decimal context used across FX arithmetic."""

    context = getcontext().copy()
    context.prec = ROUNDING_PRECISION
    context.rounding = ROUND_HALF_UP
    return context


def normalize_currency(code: str) -> str:
    """Normalize a currency code to canonical uppercase form."""

    if not code or not str(code).strip():
        raise ValueError("Currency code cannot be blank.")
    normalized = str(code).strip().upper()
    if not normalized.isascii():
        raise ValueError(f"Currency code must be ASCII: {code!r}")
    if len(normalized) != 3 or not normalized.isalpha():
        raise ValueError(f"Currency code must be three letters: {code!r}")
    return normalized


def parse_symbols(raw: str | Iterable[str] | None) -> List[str]:
    """Split a comma-separated symbol list into unique normalized codes."""

    if raw is None:
        return []
    candidates = raw.split(",") if isinstance(raw, str) else list(raw)

    symbols: List[str] = []
    for candidate in candidates:
        if not candidate or not str(candidate).strip():
            continue
        code = normalize_currency(candidate)
        if code not in symbols:
            symbols.append(code)
    return symbols


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert input into a Decimal via its shortest string form."""

    context = get_decimal_context()
    with localcontext(context):
        return Decimal(str(value))


def is_observed_rate(value: object) -> bool:
    """Return True if ``value`` counts as a present rate observation.

    ``None``, NaN, booleans and non-numeric values are treated as missing.
    Zero is a valid observation.
    """

    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, int | float):
        return not math.isnan(value) and not math.isinf(value)
    return False


def quantize(value: Decimal | int | float | str, quantum: Decimal) -> Decimal:
    """Round half away from zero to the exponent of ``quantum``.

    Precision grows with the magnitude of ``value`` so large amounts keep
    every integer digit.
    """

    decimal_value = to_decimal(value)
    if not decimal_value.is_finite():
        raise ValueError(f"Cannot round non-finite value {value!r}")

    context = get_decimal_context()
    needed = decimal_value.adjusted() - quantum.as_tuple().exponent + 2
    context.prec = max(ROUNDING_PRECISION, needed)
    try:
        with localcontext(context):
            return decimal_value.quantize(quantum, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValueError(f"Cannot round {value!r} to {quantum}") from exc


def round_rate(value: Decimal | int | float | str) -> Decimal:
    return quantize(value, RATE_QUANTUM)


def round_percent(value: Decimal | int | float | str) -> Decimal:
    return quantize(value, PERCENT_QUANTUM)


def convert_amount(amount: Decimal | int | float | str, rate: Decimal | int | float | str) -> Decimal:
    """Convert ``amount`` at ``rate`` and round to two decimal places."""

    context = get_decimal_context()
    with localcontext(context):
        converted = to_decimal(amount) * to_decimal(rate)
    return quantize(converted, AMOUNT_QUANTUM)
