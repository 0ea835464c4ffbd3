"""Client for the Frankfurter (ECB) rates API."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any

from fx_intel.upstream.http_client import HTTPClient, HTTPClientConfig, HTTPClientError
from fx_intel.upstream.schemas import RateSeries, RateSnapshot

logger = logging.getLogger(__name__)


class FrankfurterAPIError(RuntimeError):
    """Raised when the Frankfurter API returns an error response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FrankfurterClientConfig:
    """Configuration parameters for the Frankfurter client."""

    def __init__(self, base_url: str, timeout: float) -> None:
        self.base_url = base_url
        self.timeout = timeout


class FrankfurterClient:
    """Typed access to the four Frankfurter endpoints this agent consumes."""

    def __init__(
        self,
        config: FrankfurterClientConfig,
        client: HTTPClient | None = None,
    ) -> None:
        self._config = config
        self._client = client or HTTPClient(
            HTTPClientConfig(base_url=config.base_url, timeout=config.timeout)
        )

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> FrankfurterClient:
        client_config = FrankfurterClientConfig(
            base_url=str(config.get("FRANKFURTER_API_BASE_URL")),
            timeout=float(config.get("REQUEST_TIMEOUT_SECONDS", 10)),
        )
        return cls(client_config)

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def currencies(self, *, request_id: str | None = None) -> dict[str, str]:
        """Return the supported currency codes mapped to their display names."""

        payload = self._fetch("/currencies", None, request_id)
        if not isinstance(payload, dict):
            raise FrankfurterAPIError("Frankfurter API currencies response is not an object")
        return {str(code).upper(): str(name) for code, name in payload.items()}

    def latest(
        self,
        base: str,
        symbols: Sequence[str] | None = None,
        *,
        request_id: str | None = None,
    ) -> RateSnapshot:
        payload = self.get_rates("/latest", self._params(base, symbols), request_id=request_id)
        return RateSnapshot.from_payload(payload)

    def historical(
        self,
        on: date,
        base: str,
        symbols: Sequence[str] | None = None,
        *,
        request_id: str | None = None,
    ) -> RateSnapshot:
        payload = self.get_rates(
            f"/{on.isoformat()}", self._params(base, symbols), request_id=request_id
        )
        return RateSnapshot.from_payload(payload)

    def timeseries(
        self,
        start: date,
        end: date,
        base: str,
        symbols: Sequence[str] | None = None,
        *,
        request_id: str | None = None,
    ) -> RateSeries:
        path = f"/{start.isoformat()}..{end.isoformat()}"
        payload = self.get_rates(path, self._params(base, symbols), request_id=request_id)
        return RateSeries.from_payload(payload)

    def get_rates(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        *,
        request_id: str | None = None,
    ) -> dict[str, Any]:
        """Fetch a rates payload and check its basic shape."""

        payload = self._fetch(path, params, request_id)
        if not isinstance(payload, dict) or "rates" not in payload:
            raise FrankfurterAPIError("Frankfurter API response missing 'rates' field")

        if "error" in payload:
            raise FrankfurterAPIError(f"Frankfurter API error payload: {payload['error']}")

        return payload

    def _fetch(self, path: str, params: Mapping[str, Any] | None, request_id: str | None) -> Any:
        try:
            return self._client.get(path, params=params, request_id=request_id)
        except HTTPClientError as exc:
            raise FrankfurterAPIError(str(exc), status_code=exc.status_code) from exc

    @staticmethod
    def _params(base: str, symbols: Sequence[str] | None) -> dict[str, str]:
        params = {"base": base.strip().upper()}
        if symbols:
            params["symbols"] = ",".join(code.strip().upper() for code in symbols)
        return params
