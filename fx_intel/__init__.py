"""Application factory for the FX Intel agent service."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Flask
from flask_smorest import Api

from config import get_config
from .analytics import PaymentTracker
from .cli import register_cli
from .logging import init_request_logging, setup_logging
from .payments import SettlementHook


def create_app(
    config_name: str | None = None,
    *,
    config_overrides: Mapping[str, Any] | None = None,
    tracker: PaymentTracker | None = None,
    settlement: SettlementHook | None = None,
) -> Flask:
    """Application factory adhering to the Flask app factory pattern.

    ``tracker`` and ``settlement`` are the payment collaborators; when omitted
    an in-memory tracker is used (if analytics are enabled) and paid
    entrypoints cannot settle.
    """

    app = Flask(__name__)
    config_class = get_config(config_name)
    app.config.from_object(config_class)
    if config_overrides:
        app.config.update(config_overrides)

    setup_logging(app)
    init_request_logging(app)

    _configure_api(app)
    api = _register_extensions(app, tracker=tracker, settlement=settlement)
    _register_blueprints(app, api)
    _register_error_handlers(app)

    register_cli(app)
    return app


def _configure_api(app: Flask) -> None:
    app.config.setdefault("API_TITLE", "FX Intel Agent API")
    app.config.setdefault("API_VERSION", app.config.get("AGENT_VERSION", "v1"))
    app.config.setdefault("OPENAPI_VERSION", "3.0.3")
    app.config.setdefault("OPENAPI_URL_PREFIX", "/docs")
    app.config.setdefault("OPENAPI_SWAGGER_UI_PATH", "/")
    app.config.setdefault(
        "OPENAPI_SWAGGER_UI_URL",
        "https://cdn.jsdelivr.net/npm/swagger-ui-dist/",
    )


def _register_extensions(
    app: Flask,
    *,
    tracker: PaymentTracker | None,
    settlement: SettlementHook | None,
) -> Api:
    from .context import init_context

    context = init_context(app, tracker=tracker, settlement=settlement)
    if context.payments.enabled and settlement is None:
        app.logger.warning("Payments are enabled but no settlement hook is configured.")

    api = Api(app)
    app.extensions["smorest_api"] = api
    return api


def _register_blueprints(app: Flask, api: Api) -> None:
    """Register Flask blueprints."""

    from .discovery import bp as discovery_bp
    from .entrypoints import blp as entrypoints_blp
    from .health import blp as health_blp

    api.register_blueprint(health_blp, url_prefix="/health")
    api.register_blueprint(entrypoints_blp, url_prefix="/entrypoints")
    app.register_blueprint(discovery_bp)


def _register_error_handlers(app: Flask) -> None:
    """Register global error handlers."""

    from .errors import register_error_handlers

    register_error_handlers(app)
