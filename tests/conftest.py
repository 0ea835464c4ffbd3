"""Shared pytest fixtures."""

from __future__ import annotations

import json
import sys
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from fx_intel import create_app  # noqa: E402

UPSTREAM_URL = "https://frankfurter.test/v1"


@pytest.fixture()
def make_app() -> Callable[..., Any]:
    """Build an app pointed at the stub upstream, with optional overrides."""

    def _factory(*, tracker=None, settlement=None, **overrides: Any):
        config = {
            "TESTING": True,
            "FRANKFURTER_API_BASE_URL": UPSTREAM_URL,
            "PAYMENTS_ENABLED": False,
            "ANALYTICS_ENABLED": True,
        }
        config.update(overrides)
        return create_app(
            "development",
            config_overrides=config,
            tracker=tracker,
            settlement=settlement,
        )

    return _factory


@pytest.fixture()
def app(make_app):
    """Flask application with payments disabled."""

    return make_app()


@pytest.fixture()
def client(app) -> Iterator:
    """Provide a Flask test client."""

    with app.test_client() as client:
        yield client


@pytest.fixture(scope="session")
def fixtures_dir() -> Path:
    """Return the path to bundled JSON fixtures."""

    return ROOT_DIR / "tests" / "fixtures"


@pytest.fixture()
def load_json_fixture(fixtures_dir: Path) -> Callable[[str], dict]:
    """Load a JSON fixture by filename."""

    def _loader(filename: str) -> dict:
        path = fixtures_dir / filename
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)

    return _loader
