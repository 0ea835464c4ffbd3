"""Application-wide error types and handlers."""

from __future__ import annotations

import logging
from typing import Any

from flask import Flask, jsonify

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base class for API-level errors."""

    status_code: int = 400

    def __init__(
        self,
        message: str = "",
        *,
        status_code: int | None = None,
        payload: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload or {}
        self.headers = headers or {}


class ValidationError(APIError):
    """Error raised for validation failures the request schemas cannot express."""

    status_code = 422


class UpstreamError(APIError):
    """The rates API could not be reached or returned an unusable payload."""

    status_code = 502


class PaymentRequiredError(APIError):
    """A paid entrypoint was invoked without an acceptable payment."""

    status_code = 402


class SettlementUnavailableError(APIError):
    """Payments are enforced but no settlement hook is configured."""

    status_code = 503


DEFAULT_STATUS_MESSAGES: dict[int, str] = {
    400: "Request could not be processed.",
    402: "Payment required.",
    404: "Resource not found.",
    422: "Submitted data is invalid.",
    502: "Upstream provider unavailable.",
    503: "Service temporarily unavailable. Please retry in a moment.",
}


def register_error_handlers(app: Flask) -> None:
    """Attach error handlers to the Flask application."""

    @app.errorhandler(APIError)
    def handle_api_error(error: APIError):
        message = error.message or DEFAULT_STATUS_MESSAGES.get(error.status_code, "Request failed.")

        response: dict[str, Any] = {"message": message}
        if error.payload:
            response.update(error.payload)

        field = error.payload.get("field")
        if field and "errors" not in response:
            response["errors"] = {"json": {str(field): [message]}}

        if error.status_code >= 500:
            logger.warning("Request failed with %s: %s", error.status_code, message)

        return jsonify(response), error.status_code, error.headers
