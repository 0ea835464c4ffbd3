"""Per-application agent context handed to entrypoint services."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Tuple, cast

from flask import Flask, current_app

from fx_intel.analytics import InMemoryPaymentTracker, PaymentTracker
from fx_intel.payments import PaymentGate, PricingTable, SettlementHook
from fx_intel.services.fx_conversion import parse_symbols
from fx_intel.upstream import FrankfurterClient

EXTENSION_KEY = "fx_intel"


@dataclass(frozen=True)
class AgentContext:
    """Everything a request handler needs, built once by the app factory."""

    name: str
    version: str
    description: str
    client: FrankfurterClient
    pricing: PricingTable
    payments: PaymentGate
    tracker: Optional[PaymentTracker]
    report_symbols: Tuple[str, ...]
    report_window_days: int
    fanout_workers: int
    public_url: str
    icon_path: str


def _public_url(config: Mapping[str, Any]) -> str:
    domain = config.get("PUBLIC_DOMAIN")
    if domain:
        return f"https://{str(domain).strip().rstrip('/')}"
    return str(config.get("DEFAULT_PUBLIC_URL", "")).rstrip("/")


def build_context(
    config: Mapping[str, Any],
    *,
    tracker: PaymentTracker | None = None,
    settlement: SettlementHook | None = None,
    client: FrankfurterClient | None = None,
) -> AgentContext:
    """Assemble an :class:`AgentContext` from Flask config values.

    An in-memory tracker is created when ``ANALYTICS_ENABLED`` is set and no
    tracker is supplied.
    """

    if tracker is None and config.get("ANALYTICS_ENABLED", True):
        tracker = InMemoryPaymentTracker()

    pricing = PricingTable.from_config(config)
    gate = PaymentGate(
        pricing,
        enabled=bool(config.get("PAYMENTS_ENABLED", False)),
        settlement=settlement,
        tracker=tracker,
    )

    return AgentContext(
        name=str(config.get("APP_NAME", "fx-intel")),
        version=str(config.get("AGENT_VERSION", "1.0.0")),
        description=str(config.get("AGENT_DESCRIPTION", "")),
        client=client or FrankfurterClient.from_config(config),
        pricing=pricing,
        payments=gate,
        tracker=tracker,
        report_symbols=tuple(parse_symbols(config.get("REPORT_SYMBOLS"))),
        report_window_days=int(config.get("REPORT_WINDOW_DAYS", 30)),
        fanout_workers=int(config.get("FANOUT_MAX_WORKERS", 4)),
        public_url=_public_url(config),
        icon_path=str(config.get("ICON_PATH", "icon.png")),
    )


def init_context(
    app: Flask,
    *,
    tracker: PaymentTracker | None = None,
    settlement: SettlementHook | None = None,
) -> AgentContext:
    """Build the context and attach it to the Flask app."""

    context = build_context(app.config, tracker=tracker, settlement=settlement)
    app.extensions[EXTENSION_KEY] = context
    return context


def get_context() -> AgentContext:
    context = current_app.extensions.get(EXTENSION_KEY)
    if context is None:
        raise RuntimeError("Agent context is not initialised")
    return cast(AgentContext, context)
