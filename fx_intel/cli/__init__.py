"""CLI entry points."""

from __future__ import annotations

from flask import Flask

from .commands import show_pricing, show_report


def register_cli(app: Flask) -> None:
    """Register CLI commands on the given Flask app."""

    app.cli.add_command(show_pricing)
    app.cli.add_command(show_report)
