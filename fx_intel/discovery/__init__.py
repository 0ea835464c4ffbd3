"""Discovery documents and assets served at well-known paths."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("discovery", __name__)

from . import routes  # noqa: E402,F401
