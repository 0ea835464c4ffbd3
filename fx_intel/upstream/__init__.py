"""Upstream rates API client and payload types."""

from .frankfurter_client import (
    FrankfurterAPIError,
    FrankfurterClient,
    FrankfurterClientConfig,
)
from .http_client import HTTPClient, HTTPClientConfig, HTTPClientError
from .schemas import RatePoint, RateSeries, RateSnapshot

__all__ = [
    "FrankfurterAPIError",
    "FrankfurterClient",
    "FrankfurterClientConfig",
    "HTTPClient",
    "HTTPClientConfig",
    "HTTPClientError",
    "RatePoint",
    "RateSeries",
    "RateSnapshot",
]
