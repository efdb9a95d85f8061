"""CLI for printing the rate comparison table."""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from config import SUPPORTED_WINDOW_ORIENTATIONS
from ratecompare.errors import NoRatesFoundError
from ratecompare.providers.base import ProviderError
from ratecompare.services.report import build_configured_report, render_text


@click.command("show-report")
@click.option("--days", type=click.IntRange(min=1), default=None, help="Window length in days.")
@click.option(
    "--orientation",
    type=click.Choice(sorted(SUPPORTED_WINDOW_ORIENTATIONS)),
    default=None,
    help="Place the window before the anchor date or end it on the anchor date.",
)
@with_appcontext
def show_report(days: int | None, orientation: str | None) -> None:
    """Print the card-network versus historical API comparison."""

    try:
        report = build_configured_report(days=days, orientation=orientation)
    except (NoRatesFoundError, ProviderError) as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(render_text(report), nl=False)
    if report.truncated:
        click.echo(
            f"Window stopped after {len(report.rows)} of {report.requested_days} days: "
            f"{report.card_source} rate unavailable."
        )
