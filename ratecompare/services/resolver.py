"""Rate resolution: get-or-create identities and get-or-fetch-and-cache rate values."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import date
from decimal import Decimal
from time import perf_counter

from sqlalchemy.exc import IntegrityError

from ratecompare.errors import NoRatesFoundError, RateExistsError
from ratecompare.logging import provider_log_extra
from ratecompare.models import RatePair, RateSource
from ratecompare.providers.base import BaseRateProvider, ProviderError, UnsupportedDateError
from ratecompare.services.rate_store import RateStore
from ratecompare.utils.datetime import to_calendar_day, today_utc

logger = logging.getLogger(__name__)

RESOLVER_EXT_KEY = "rate_resolver"


class RateResolver:
    """Resolve rates for a pair and source, caching every closed day in the store.

    Today's rate is provisional: it is fetched on every call and never
    written, so the cache only ever holds values for days that have
    closed.
    """

    def __init__(
        self,
        store: RateStore,
        providers: Mapping[str, BaseRateProvider],
        today: Callable[[], date] = today_utc,
    ) -> None:
        self._store = store
        self._providers = {name.strip().lower(): provider for name, provider in providers.items()}
        self._today = today

    def today(self) -> date:
        return self._today()

    def provider_for(self, source: RateSource) -> BaseRateProvider:
        return self.provider_for_name(source.name)

    def provider_for_name(self, name: str) -> BaseRateProvider:
        try:
            return self._providers[name.strip().lower()]
        except KeyError as exc:
            raise ProviderError(f"No provider configured for source '{name}'") from exc

    def get_or_create_pair(self, from_currency: str, to_currency: str, amount: float) -> RatePair:
        from_code = from_currency.strip().upper()
        to_code = to_currency.strip().upper()
        amount_value = float(amount)

        pair = self._store.find_pair(from_code, to_code, amount_value)
        if pair is not None:
            return pair
        try:
            pair = self._store.insert_pair(from_code, to_code, amount_value)
            logger.info("Created rate pair %s->%s (amount %s)", from_code, to_code, amount_value)
            return pair
        except IntegrityError:
            # Another writer created it first; its row is the one to use.
            pair = self._store.find_pair(from_code, to_code, amount_value)
            if pair is None:
                raise
            return pair

    def get_or_create_source(self, name: str) -> RateSource:
        # Stored under the same key provider_for_name matches on.
        source_name = name.strip().lower()
        source = self._store.find_source(source_name)
        if source is not None:
            return source
        try:
            source = self._store.insert_source(source_name)
            logger.info("Created rate source '%s'", source_name)
            return source
        except IntegrityError:
            source = self._store.find_source(source_name)
            if source is None:
                raise
            return source

    def resolve_rate(self, pair: RatePair, source: RateSource, on: date) -> Decimal:
        """Return the rate for ``on``, from the store when cached, else from the provider."""

        value, _cached = self.resolve_rate_with_status(pair, source, on)
        return value

    def resolve_rate_with_status(
        self, pair: RatePair, source: RateSource, on: date
    ) -> tuple[Decimal, bool]:
        """Like :meth:`resolve_rate` but also report whether the store answered."""

        day = to_calendar_day(on)
        stored = self._store.find_rate(pair.id, source.id, day)
        if stored is not None:
            return stored.value, True

        today = self.today()
        value = self.fetch_rate(pair, source, day, today=today)

        if day == today:
            logger.debug("Not caching provisional rate for %s from '%s'", day, source.name)
            return value, False

        try:
            self.add_rate_value(pair, source, day, value)
        except RateExistsError:
            # A concurrent resolution stored the day first; serve its value.
            stored = self._store.find_rate(pair.id, source.id, day)
            if stored is None:
                raise
            return stored.value, True
        return value, False

    def fetch_rate(
        self, pair: RatePair, source: RateSource, on: date, *, today: date | None = None
    ) -> Decimal:
        """Fetch ``on`` from the source's provider, enforcing its declared date support."""

        provider = self.provider_for(source)
        current_day = today if today is not None else self.today()
        if not provider.supports(on, current_day):
            raise UnsupportedDateError(provider.name, on, current_day)

        pair_label = f"{pair.from_currency}/{pair.to_currency}"
        start = perf_counter()
        try:
            value = Decimal(str(provider.get_rate(pair.from_currency, pair.to_currency, on)))
        except ProviderError as exc:
            duration = (perf_counter() - start) * 1000
            logger.warning(
                "Provider fetch failed: %s",
                exc,
                extra=provider_log_extra(
                    provider=provider.name,
                    pair=pair_label,
                    on=on,
                    event="provider.fetch",
                    status="error",
                    duration_ms=duration,
                    error=str(exc),
                ),
            )
            raise

        duration = (perf_counter() - start) * 1000
        logger.info(
            "Provider fetch succeeded",
            extra=provider_log_extra(
                provider=provider.name,
                pair=pair_label,
                on=on,
                event="provider.fetch",
                status="success",
                duration_ms=duration,
            ),
        )
        return value

    def add_rate_value(self, pair: RatePair, source: RateSource, on: date, value: Decimal) -> None:
        """Insert a rate, refusing to touch an existing pair/source/date key."""

        day = to_calendar_day(on)
        if self._store.find_rate(pair.id, source.id, day) is not None:
            raise RateExistsError(pair.id, source.name, day)
        try:
            self._store.insert_rate(pair.id, source.id, day, Decimal(str(value)))
        except IntegrityError as exc:
            raise RateExistsError(pair.id, source.name, day) from exc

    def most_recent_date(self, pair: RatePair, source: RateSource) -> date:
        rate = self._store.find_most_recent_rate(pair.id, source.id)
        if rate is None:
            raise NoRatesFoundError(source.name)
        return rate.date


def init_resolver(app) -> RateResolver:
    """Build the resolver from the app's providers and store it on the app."""

    from ratecompare.providers.registry import PROVIDERS_EXT_KEY, init_providers

    providers = app.extensions.get(PROVIDERS_EXT_KEY)
    if providers is None:
        providers = init_providers(app)

    resolver = RateResolver(store=RateStore(), providers=providers)
    app.extensions[RESOLVER_EXT_KEY] = resolver
    return resolver


def get_resolver(app) -> RateResolver:
    resolver = app.extensions.get(RESOLVER_EXT_KEY)
    if resolver is None:
        raise RuntimeError("Rate resolver is not initialised")
    return resolver
