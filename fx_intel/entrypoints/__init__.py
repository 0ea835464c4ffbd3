"""Entrypoints blueprint exposing the priced agent operations."""

from __future__ import annotations

from flask_smorest import Blueprint

blp = Blueprint("Entrypoints", __name__, description="Priced FX entrypoints")

from . import routes  # noqa: E402,F401
