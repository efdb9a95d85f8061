"""Import a window of past rates into the store through the strict insert."""

from __future__ import annotations

import logging
from datetime import date, timedelta

from ratecompare.models import RatePair, RateSource
from ratecompare.services.resolver import RateResolver
from ratecompare.utils.datetime import iter_days

logger = logging.getLogger(__name__)


def backfill_window(
    resolver: RateResolver,
    pair: RatePair,
    source: RateSource,
    start_offset: int,
    end_offset: int,
    *,
    today: date | None = None,
) -> int:
    """Fetch and insert every day from ``today + start_offset`` to ``today + end_offset``.

    Days are walked oldest first. Each value is fetched unconditionally and
    written with :meth:`RateResolver.add_rate_value`. The first error of
    any kind stops the run and is raised, including ``RateExistsError``
    when a day is already on record. Returns the number of rates inserted.
    """

    if start_offset > end_offset:
        raise ValueError("start_offset must not be after end_offset")

    anchor = today if today is not None else resolver.today()
    start = anchor + timedelta(days=start_offset)
    end = anchor + timedelta(days=end_offset)
    logger.info(
        "Backfilling %s/%s from '%s' for %s..%s",
        pair.from_currency,
        pair.to_currency,
        source.name,
        start.isoformat(),
        end.isoformat(),
    )

    inserted = 0
    for day in iter_days(start, end):
        value = resolver.fetch_rate(pair, source, day, today=anchor)
        resolver.add_rate_value(pair, source, day, value)
        inserted += 1
        logger.debug("Stored %s rate %s for %s", source.name, value, day.isoformat())

    logger.info("Backfill stored %s rates from '%s'", inserted, source.name)
    return inserted


def run_backfill(
    start_offset: int | None = None,
    end_offset: int | None = None,
    source_name: str | None = None,
) -> int:
    """Backfill the configured pair from the app context's resolver and config."""

    from flask import current_app

    from ratecompare.services.resolver import get_resolver

    config = current_app.config
    resolver = get_resolver(current_app)

    pair = resolver.get_or_create_pair(
        config["RATE_FROM_CURRENCY"], config["RATE_TO_CURRENCY"], config["RATE_AMOUNT"]
    )
    source = resolver.get_or_create_source(source_name or config["BACKFILL_SOURCE"])

    return backfill_window(
        resolver,
        pair,
        source,
        config["BACKFILL_START_OFFSET"] if start_offset is None else start_offset,
        config["BACKFILL_END_OFFSET"] if end_offset is None else end_offset,
    )
