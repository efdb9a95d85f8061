"""Day-by-day comparison of the card-network rate against the historical API rate."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional, Sequence

from ratecompare.models import RatePair, RateSource
from ratecompare.providers.base import ProviderError
from ratecompare.services.resolver import RateResolver
from ratecompare.utils.datetime import iter_days

logger = logging.getLogger(__name__)

ORIENTATION_BEFORE_ANCHOR = "before_anchor"
ORIENTATION_ENDING_AT_ANCHOR = "ending_at_anchor"


@dataclass(frozen=True)
class ComparisonRow:
    """Both rates for one calendar day and how far the card rate deviates."""

    date: date
    api_rate: Decimal
    card_rate: Decimal
    deviation_pct: Decimal


@dataclass(frozen=True)
class ComparisonReport:
    """Series collected over the window plus the averages across it."""

    pair: str
    api_source: str
    card_source: str
    anchor_date: date
    requested_days: int
    truncated: bool
    rows: List[ComparisonRow]
    average_api_rate: Optional[Decimal]
    average_card_rate: Optional[Decimal]
    average_deviation_pct: Optional[Decimal]


def deviation_pct(card_rate: Decimal, api_rate: Decimal) -> Decimal:
    """Percentage by which ``card_rate`` exceeds ``api_rate``."""

    return card_rate / api_rate * 100 - 100


def mean(values: Sequence[Decimal]) -> Optional[Decimal]:
    if not values:
        return None
    return sum(values, Decimal("0")) / len(values)


def window_bounds(anchor: date, days: int, orientation: str) -> tuple[date, date]:
    """Return the inclusive first and last day of a report window."""

    if days <= 0:
        raise ValueError("days must be a positive integer")
    if orientation == ORIENTATION_BEFORE_ANCHOR:
        return anchor - timedelta(days=days), anchor - timedelta(days=1)
    if orientation == ORIENTATION_ENDING_AT_ANCHOR:
        return anchor - timedelta(days=days - 1), anchor
    raise ValueError(f"Unknown window orientation '{orientation}'")


def build_report(
    resolver: RateResolver,
    pair: RatePair,
    card_source: RateSource,
    api_source: RateSource,
    *,
    days: int,
    orientation: str = ORIENTATION_BEFORE_ANCHOR,
) -> ComparisonReport:
    """Compare both sources over a window anchored at the newest card-network rate.

    A card-network failure ends the window early and the rows collected so
    far are still averaged. A failure on the API side is raised.
    """

    anchor = resolver.most_recent_date(pair, card_source)
    start, end = window_bounds(anchor, days, orientation)

    rows: list[ComparisonRow] = []
    truncated = False
    for day in iter_days(start, end):
        try:
            card_rate = resolver.resolve_rate(pair, card_source, day)
        except ProviderError as exc:
            logger.warning(
                "Stopping report at %s: %s rate unavailable (%s)",
                day.isoformat(),
                card_source.name,
                exc,
            )
            truncated = True
            break

        api_rate = resolver.resolve_rate(pair, api_source, day)
        rows.append(
            ComparisonRow(
                date=day,
                api_rate=api_rate,
                card_rate=card_rate,
                deviation_pct=deviation_pct(card_rate, api_rate),
            )
        )

    average_api = mean([row.api_rate for row in rows])
    average_card = mean([row.card_rate for row in rows])
    average_deviation = (
        deviation_pct(average_card, average_api)
        if average_api is not None and average_card is not None
        else None
    )

    return ComparisonReport(
        pair=f"{pair.from_currency}/{pair.to_currency}",
        api_source=api_source.name,
        card_source=card_source.name,
        anchor_date=anchor,
        requested_days=days,
        truncated=truncated,
        rows=rows,
        average_api_rate=average_api,
        average_card_rate=average_card,
        average_deviation_pct=average_deviation,
    )


def build_configured_report(
    days: int | None = None, orientation: str | None = None
) -> ComparisonReport:
    """Build the report for the configured pair and sources inside an app context."""

    from flask import current_app

    from ratecompare.providers.oxr_provider import OpenExchangeRatesProvider
    from ratecompare.providers.visa_provider import VisaProvider
    from ratecompare.services.resolver import get_resolver

    config = current_app.config
    resolver = get_resolver(current_app)

    pair = resolver.get_or_create_pair(
        config["RATE_FROM_CURRENCY"], config["RATE_TO_CURRENCY"], config["RATE_AMOUNT"]
    )
    card_source = resolver.get_or_create_source(VisaProvider.name)
    api_source = resolver.get_or_create_source(OpenExchangeRatesProvider.name)

    return build_report(
        resolver,
        pair,
        card_source,
        api_source,
        days=days or config["REPORT_WINDOW_DAYS"],
        orientation=orientation or config["REPORT_WINDOW_ORIENTATION"],
    )


def render_text(report: ComparisonReport) -> str:
    """Render the report as the fixed-width table served at ``/report/text``."""

    base, _, quote = report.pair.partition("/")
    lines = [
        f"{base} to {quote}",
        "",
        f"{'':<16}{'OXR':<16}{'Visa':<16}Visa difference",
    ]
    for row in report.rows:
        lines.append(
            f"{row.date.isoformat():<16}{_rate(row.api_rate):<16}{_rate(row.card_rate):<16}"
            f"{_pct(row.deviation_pct)}"
        )
    lines.append("")
    lines.append(
        f"{'Average':<16}{_rate(report.average_api_rate):<16}{_rate(report.average_card_rate):<16}"
        f"{_pct(report.average_deviation_pct)}"
    )
    return "\n".join(lines) + "\n"


def _rate(value: Optional[Decimal]) -> str:
    if value is None:
        return "n/a"
    return format(round(value, 6).normalize(), "f")


def _pct(value: Optional[Decimal]) -> str:
    if value is None:
        return "n/a"
    return f"{value:+.2f}%"
