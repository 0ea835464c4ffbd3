"""Schemas for API responses outside the entrypoints."""

from __future__ import annotations

from marshmallow import Schema, fields


class HealthStatusSchema(Schema):
    status = fields.String(required=True)
    app = fields.String()
    version = fields.String()
    payments_enabled = fields.Boolean(data_key="paymentsEnabled")
    analytics_enabled = fields.Boolean(data_key="analyticsEnabled")
