"""Route handlers for health checks."""

from __future__ import annotations

from flask import current_app
from flask.views import MethodView

from fx_intel.context import get_context
from fx_intel.schemas import HealthStatusSchema

from . import blp


@blp.route("")
class HealthStatus(MethodView):
    @blp.response(200, HealthStatusSchema())
    def get(self):
        ctx = get_context()
        return {
            "status": "ok",
            "app": current_app.config.get("APP_NAME", "fx-intel"),
            "version": ctx.version,
            "payments_enabled": ctx.payments.enabled,
            "analytics_enabled": ctx.tracker is not None,
        }
