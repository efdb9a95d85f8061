"""Open Exchange Rates provider implementation."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from ratecompare.providers.base import BaseRateProvider, DateSupport, ProviderError, positive_rate

from .oxr_client import (
    OpenExchangeRatesClient,
    OpenExchangeRatesClientConfig,
    OpenExchangeRatesError,
)


class OpenExchangeRatesProvider(BaseRateProvider):
    """Historical rates from openexchangerates.org; any past day can be requested."""

    name = "openexchangerates.org"
    date_support = DateSupport.ANY_DATE

    def __init__(self, client: OpenExchangeRatesClient) -> None:
        self._client = client

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> OpenExchangeRatesProvider:
        base_url_value = config.get("OXR_API_BASE_URL")
        if not isinstance(base_url_value, str) or not base_url_value.strip():
            base_url = "https://openexchangerates.org/api"
        else:
            base_url = base_url_value
        client_config = OpenExchangeRatesClientConfig(
            base_url=base_url,
            app_id=str(config.get("OXR_APP_ID") or ""),
            timeout=float(config.get("REQUEST_TIMEOUT_SECONDS", 10)),
        )
        return cls(OpenExchangeRatesClient(client_config))

    def get_rate(self, base: str, symbol: str, on: date) -> Decimal:
        base_currency = _normalize_code(base)
        quote_currency = _normalize_code(symbol)
        params = {"base": base_currency, "symbols": quote_currency}
        try:
            payload = self._client.get(f"/historical/{on.isoformat()}.json", params=params)
        except OpenExchangeRatesError as exc:
            raise ProviderError(str(exc)) from exc

        rates = payload.get("rates") or {}
        value = rates.get(quote_currency)
        if value is None:
            raise ProviderError(
                f"Open Exchange Rates returned no {quote_currency} rate for {on.isoformat()}"
            )
        try:
            rate = Decimal(str(value))
        except InvalidOperation as exc:
            raise ProviderError(f"Unparseable rate {value!r} from Open Exchange Rates") from exc
        return positive_rate(rate, "Open Exchange Rates")


def _normalize_code(value: str) -> str:
    if not value or not str(value).strip():
        raise ProviderError("Currency symbol cannot be empty.")
    return str(value).strip().upper()
