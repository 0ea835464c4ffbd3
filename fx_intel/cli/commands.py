"""CLI commands for inspecting pricing and generating reports offline."""

from __future__ import annotations

import json

import click
from flask.cli import with_appcontext

from fx_intel.catalog import ENTRYPOINTS
from fx_intel.context import get_context
from fx_intel.entrypoints.schemas import ReportOutputSchema
from fx_intel.errors import APIError
from fx_intel.services.fx_conversion import normalize_currency
from fx_intel.services.rates import build_report


@click.command("fx-pricing")
@with_appcontext
def show_pricing() -> None:
    """List entrypoints with their configured prices."""

    pricing = get_context().pricing
    for entry in ENTRYPOINTS:
        amount = pricing.amount_for(entry.key)
        label = "free" if amount == 0 else f"{amount} {pricing.currency}"
        click.echo(f"{entry.key:<24} {label}")


@click.command("fx-report")
@click.option("--base", default="USD", show_default=True, help="Base currency")
@with_appcontext
def show_report(base: str) -> None:
    """Fetch and print the FX report for BASE as JSON."""

    try:
        base_code = normalize_currency(base)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--base") from exc

    try:
        report = build_report(get_context(), base_code)
    except APIError as exc:
        raise click.ClickException(exc.message) from exc

    click.echo(json.dumps(ReportOutputSchema().dump(report), indent=2))
