"""Tests for the discovery documents and icon."""

from __future__ import annotations


def test_erc8004_registration_document(make_app):
    app = make_app(PUBLIC_DOMAIN="fx.example.com", AGENT_DESCRIPTION="FX data.")

    with app.test_client() as client:
        response = client.get("/.well-known/erc8004.json")

    assert response.status_code == 200
    assert response.get_json() == {
        "type": "https://eips.ethereum.org/EIPS/eip-8004#registration-v1",
        "name": "fx-intel",
        "description": "FX data. 1 free + 5 paid endpoints via x402.",
        "image": "https://fx.example.com/icon.png",
        "services": [
            {"name": "web", "endpoint": "https://fx.example.com"},
            {
                "name": "A2A",
                "endpoint": "https://fx.example.com/.well-known/agent.json",
                "version": "0.3.0",
            },
        ],
        "x402Support": True,
        "active": True,
        "registrations": [],
        "supportedTrust": ["reputation"],
    }


def test_registration_falls_back_to_default_url(make_app):
    app = make_app(PUBLIC_DOMAIN=None, DEFAULT_PUBLIC_URL="https://fallback.example.com/")

    with app.test_client() as client:
        payload = client.get("/.well-known/erc8004.json").get_json()

    assert payload["services"][0]["endpoint"] == "https://fallback.example.com"


def test_agent_card_lists_entrypoints(make_app):
    app = make_app(PUBLIC_DOMAIN="fx.example.com")

    with app.test_client() as client:
        card = client.get("/.well-known/agent.json").get_json()

    assert card["url"] == "https://fx.example.com"
    assert card["payments"]["currency"] == "USDC"
    assert card["entrypoints"]["report"]["price"] == "5000"
    assert card["entrypoints"]["convert"]["invoke"] == (
        "https://fx.example.com/entrypoints/convert/invoke"
    )


def test_icon_served_when_present(make_app, tmp_path):
    icon = tmp_path / "icon.png"
    icon.write_bytes(b"\x89PNG\r\n\x1a\nfake")
    app = make_app(ICON_PATH=str(icon))

    with app.test_client() as client:
        response = client.get("/icon.png")

    assert response.status_code == 200
    assert response.mimetype == "image/png"
    assert response.data.startswith(b"\x89PNG")


def test_icon_missing_returns_404(make_app, tmp_path):
    app = make_app(ICON_PATH=str(tmp_path / "missing.png"))

    with app.test_client() as client:
        response = client.get("/icon.png")

    assert response.status_code == 404
    assert response.data == b"Icon not found"
