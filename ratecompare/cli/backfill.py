"""CLI for importing a window of past rates."""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from ratecompare.errors import RateExistsError
from ratecompare.providers.base import ProviderError
from ratecompare.services.backfill import run_backfill


@click.command("backfill-rates")
@click.option(
    "--start-offset",
    type=int,
    default=None,
    help="First day to import, in days relative to today (e.g. -31). Defaults to config.",
)
@click.option(
    "--end-offset",
    type=int,
    default=None,
    help="Last day to import, in days relative to today (e.g. -1). Defaults to config.",
)
@click.option("--source", default=None, help="Rate source to import from. Defaults to config.")
@with_appcontext
def backfill_rates(start_offset: int | None, end_offset: int | None, source: str | None) -> None:
    """Import past rates into the store, stopping at the first error."""

    click.echo("Starting rate import...")
    try:
        inserted = run_backfill(start_offset=start_offset, end_offset=end_offset, source_name=source)
    except RateExistsError as exc:
        # An already imported window is not a failure.
        click.echo(f"Nothing to do: {exc}")
        return
    except ProviderError as exc:
        raise click.ClickException(f"Import stopped: {exc}") from exc
    click.echo(f"Import complete: {inserted} rates stored.")
