"""Shared HTTP client wrapper for the upstream rates API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from time import perf_counter
from typing import Any, Mapping, Optional

import requests
from requests import Response, Session
from requests.exceptions import JSONDecodeError, RequestException

from fx_intel.logging import upstream_log_extra

logger = logging.getLogger(__name__)


class HTTPClientError(RuntimeError):
    """Raised when the HTTP client cannot satisfy a request."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class HTTPClientConfig:
    """Configuration for the shared HTTP client."""

    base_url: str
    timeout: float = 10.0


class HTTPClient:
    """Small HTTP client issuing exactly one attempt per call.

    Failures are surfaced immediately; callers decide what a failed fetch
    means for their request.
    """

    def __init__(
        self,
        config: HTTPClientConfig,
        session: Optional[Session] = None,
    ) -> None:
        self._config = config
        self._session = session or requests.Session()

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def get(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        request_id: str | None = None,
    ) -> Any:
        url = self._build_url(path)
        start = perf_counter()
        try:
            response = self._session.get(url, params=params, timeout=self._config.timeout)
            payload = self._handle_response(response)
        except RequestException as exc:
            self._log_failure(path, start, request_id, str(exc), status_code=None)
            raise HTTPClientError(f"Failed to fetch {url}: {exc}") from exc
        except HTTPClientError as exc:
            self._log_failure(path, start, request_id, str(exc), status_code=exc.status_code)
            raise

        logger.debug(
            "Upstream fetch succeeded",
            extra=upstream_log_extra(
                endpoint=path,
                event="upstream.fetch",
                status="success",
                duration_ms=(perf_counter() - start) * 1000,
                request_id=request_id,
                upstream_status=response.status_code,
            ),
        )
        return payload

    def _log_failure(
        self,
        path: str,
        start: float,
        request_id: str | None,
        error: str,
        *,
        status_code: int | None,
    ) -> None:
        logger.warning(
            "Upstream fetch failed: %s",
            error,
            extra=upstream_log_extra(
                endpoint=path,
                event="upstream.fetch",
                status="error",
                duration_ms=(perf_counter() - start) * 1000,
                request_id=request_id,
                upstream_status=status_code,
                error=error,
            ),
        )

    def _build_url(self, path: str) -> str:
        base = self._config.base_url.rstrip("/")
        suffix = path.lstrip("/")
        return f"{base}/{suffix}"

    @staticmethod
    def _handle_response(response: Response) -> Any:
        status = response.status_code
        if status >= 500:
            raise HTTPClientError(f"Server error {status}", status_code=status)
        if status >= 400:
            raise HTTPClientError(f"Client error {status}: {response.text}", status_code=status)

        try:
            return response.json()
        except (JSONDecodeError, ValueError) as exc:
            raise HTTPClientError("Invalid JSON response", status_code=status) from exc
