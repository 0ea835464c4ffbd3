"""Structured logging for the FX Intel agent.

Request handling and upstream fetches both log through stdlib ``logging``
with their context in ``extra``; ``JSONLogFormatter`` renders those extras as
top-level JSON keys.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from datetime import UTC, datetime
from typing import Any

from flask import Flask, Response, g, has_request_context, request
from werkzeug.exceptions import HTTPException

REQUEST_ID_HEADER = "X-Request-ID"
DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_LOGGING_FLAG = "_logging_configured"
_REQUEST_LOGGING_FLAG = "_request_logging_configured"

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}


class JSONLogFormatter(logging.Formatter):
    """Render a record and its ``extra`` fields as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = record.stack_info

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                payload[key] = value

        return json.dumps(_json_safe(payload), separators=(",", ":"))


def setup_logging(app: Flask) -> None:
    """Install a single root handler configured from ``LOG_*`` settings."""

    if app.config.get(_LOGGING_FLAG):
        return

    level = _resolve_level(app.config.get("LOG_LEVEL", "INFO"))
    handler = logging.StreamHandler()
    handler.setLevel(level)
    if _to_bool(app.config.get("LOG_JSON_ENABLED", False)):
        handler.setFormatter(JSONLogFormatter())
    else:
        handler.setFormatter(logging.Formatter(app.config.get("LOG_FORMAT", DEFAULT_LOG_FORMAT)))

    root = logging.getLogger()
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    # Flask and werkzeug propagate to the root handler instead of their own.
    for logger in (logging.getLogger("werkzeug"), app.logger):
        logger.handlers = []
        logger.setLevel(level)
    app.logger.propagate = True

    app.config[_LOGGING_FLAG] = True


def init_request_logging(app: Flask) -> None:
    """Log one line per request, correlated by ``X-Request-ID``."""

    if app.config.get(_REQUEST_LOGGING_FLAG):
        return

    app.before_request(_begin_request)
    app.after_request(_finish_request)
    app.teardown_request(_abort_request)
    app.config[_REQUEST_LOGGING_FLAG] = True


def _begin_request() -> None:
    g.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    g.request_start = time.perf_counter()
    g._request_logged = False


def _finish_request(response: Response) -> Response:
    request_id = getattr(g, "request_id", None)
    if request_id:
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)

    logging.getLogger("fx_intel.request").info(
        "Request handled",
        extra=_request_extra("request.completed", response.status_code),
    )
    g._request_logged = True
    return response


def _abort_request(exc: BaseException | None) -> None:
    if exc is None or getattr(g, "_request_logged", False):
        return

    status = exc.code if isinstance(exc, HTTPException) and exc.code else 500
    logging.getLogger("fx_intel.request").error(
        "Request failed",
        extra=_request_extra("request.failed", status, error=str(exc)),
    )
    g._request_logged = True


def _request_extra(event: str, status: int, *, error: str | None = None) -> dict[str, Any]:
    start = getattr(g, "request_start", None)
    duration_ms = (time.perf_counter() - start) * 1000 if start is not None else None
    return _compact(
        {
            "event": event,
            "route": request.url_rule.rule if request.url_rule else request.path,
            "method": request.method,
            "path": request.path,
            "status": status,
            "duration_ms": _round_ms(duration_ms),
            "request_id": getattr(g, "request_id", None),
            "entrypoint": getattr(g, "entrypoint", None),
            "client_ip": request.remote_addr,
            "error": error,
        }
    )


def upstream_log_extra(
    *,
    endpoint: str,
    event: str,
    status: str,
    duration_ms: float | None,
    request_id: str | None = None,
    upstream_status: int | None = None,
    error: str | None = None,
) -> dict[str, Any]:
    """Build the structured ``extra`` mapping for an upstream fetch log line.

    Fetches may run on fan-out worker threads, where no request context is
    active, so callers capture ``request_id`` up front and pass it in.
    """

    return _compact(
        {
            "event": event,
            "upstream_endpoint": endpoint,
            "status": status,
            "duration_ms": _round_ms(duration_ms),
            "request_id": request_id or current_request_id(),
            "upstream_status": upstream_status,
            "source": "upstream",
            "error": error,
        }
    )


def current_request_id() -> str | None:
    if not has_request_context():
        return None
    return getattr(g, "request_id", None)


def _compact(payload: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in payload.items() if value not in (None, "")}


def _round_ms(value: float | None) -> float | None:
    return round(value, 3) if value is not None else None


def _json_safe(value: Any) -> Any:
    if isinstance(value, str | int | float | bool) or value is None:
        return value
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, list | tuple | set):
        return [_json_safe(item) for item in value]
    return str(value)


def _resolve_level(level_name: Any) -> int:
    if isinstance(level_name, int):
        return level_name
    return getattr(logging, str(level_name or "INFO").upper(), logging.INFO)


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}
