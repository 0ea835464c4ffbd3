"""Routes for agent discovery (ERC-8004 registration, agent card, icon)."""

from __future__ import annotations

from pathlib import Path

from flask import Response, jsonify, send_file

from fx_intel.catalog import ENTRYPOINTS
from fx_intel.context import AgentContext, get_context

from . import bp

ERC8004_REGISTRATION_TYPE = "https://eips.ethereum.org/EIPS/eip-8004#registration-v1"
A2A_PROTOCOL_VERSION = "0.3.0"
REGISTRATION_SUMMARY = "1 free + 5 paid endpoints via x402."


def registration_document(ctx: AgentContext) -> dict:
    base_url = ctx.public_url
    return {
        "type": ERC8004_REGISTRATION_TYPE,
        "name": ctx.name,
        "description": f"{ctx.description} {REGISTRATION_SUMMARY}".strip(),
        "image": f"{base_url}/icon.png",
        "services": [
            {"name": "web", "endpoint": base_url},
            {
                "name": "A2A",
                "endpoint": f"{base_url}/.well-known/agent.json",
                "version": A2A_PROTOCOL_VERSION,
            },
        ],
        "x402Support": True,
        "active": True,
        "registrations": [],
        "supportedTrust": ["reputation"],
    }


def agent_card(ctx: AgentContext) -> dict:
    pricing = ctx.pricing
    return {
        "name": ctx.name,
        "version": ctx.version,
        "description": ctx.description,
        "url": ctx.public_url,
        "protocolVersion": A2A_PROTOCOL_VERSION,
        "capabilities": {"streaming": False},
        "payments": {
            "enabled": ctx.payments.enabled,
            "currency": pricing.currency,
            "network": pricing.network,
            "payTo": pricing.pay_to,
        },
        "entrypoints": {
            entry.key: {
                "description": entry.description,
                "price": str(pricing.amount_for(entry.key)),
                "invoke": f"{ctx.public_url}/entrypoints/{entry.key}/invoke",
            }
            for entry in ENTRYPOINTS
        },
    }


@bp.get("/.well-known/erc8004.json")
def erc8004_registration() -> Response:
    return jsonify(registration_document(get_context()))


@bp.get("/.well-known/agent.json")
def agent_manifest() -> Response:
    return jsonify(agent_card(get_context()))


@bp.get("/icon.png")
def icon():
    path = Path(get_context().icon_path)
    if not path.is_file():
        return Response("Icon not found", status=404, mimetype="text/plain")
    return send_file(path.resolve(), mimetype="image/png")
