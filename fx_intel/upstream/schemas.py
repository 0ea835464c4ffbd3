"""Dataclasses describing Frankfurter payloads."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping


def _normalize_code(code: str) -> str:
    normalized = str(code).strip().upper()
    if not normalized.isascii():
        raise ValueError(f"Currency code must be ASCII: {code!r}")
    return normalized


def _normalize_rates(rates: Mapping[str, Any]) -> Dict[str, Any]:
    # Values are kept as delivered; missing or null rates are the stats
    # engine's concern, not the parser's.
    return {_normalize_code(code): value for code, value in rates.items()}


@dataclass(frozen=True)
class RateSnapshot:
    """Rates for one base currency on one date (``/latest`` or ``/{date}``)."""

    base: str
    date: date
    rates: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "base", _normalize_code(self.base))
        object.__setattr__(self, "rates", _normalize_rates(self.rates))

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> RateSnapshot:
        return cls(
            base=payload["base"],
            date=date.fromisoformat(str(payload["date"])),
            rates=payload.get("rates") or {},
        )


@dataclass(frozen=True)
class RatePoint:
    """One observation date inside a range response."""

    date: date
    rates: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rates", _normalize_rates(self.rates))


@dataclass(frozen=True)
class RateSeries:
    """Date-ascending rates for a base currency over a requested range.

    The upstream omits dates without trading activity, so consecutive points
    are not necessarily consecutive calendar days.
    """

    base: str
    start_date: date
    end_date: date
    points: List[RatePoint] = field(default_factory=list)

    def __post_init__(self) -> None:
        object.__setattr__(self, "base", _normalize_code(self.base))
        for point in self.points:
            if not isinstance(point, RatePoint):
                raise TypeError("points must contain RatePoint instances")
        object.__setattr__(self, "points", sorted(self.points, key=lambda point: point.date))

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> RateSeries:
        rates_by_date = payload.get("rates") or {}
        points = []
        for day, rate_map in rates_by_date.items():
            if rate_map is not None and not isinstance(rate_map, Mapping):
                raise ValueError(f"Rates for {day} must be an object")
            points.append(RatePoint(date=date.fromisoformat(str(day)), rates=rate_map or {}))
        return cls(
            base=payload["base"],
            start_date=date.fromisoformat(str(payload["start_date"])),
            end_date=date.fromisoformat(str(payload["end_date"])),
            points=points,
        )

    @property
    def snapshots(self) -> List[Dict[str, Any]]:
        """Per-date rate mappings in date order."""

        return [point.rates for point in self.points]

    def rates_by_date(self) -> Dict[str, Dict[str, Any]]:
        return {point.date.isoformat(): dict(point.rates) for point in self.points}

    def __len__(self) -> int:
        return len(self.points)
