"""Visa card-network provider implementation."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any
from urllib.parse import urlparse

from ratecompare.providers.base import BaseRateProvider, DateSupport, ProviderError, positive_rate

from .visa_client import VisaAPIError, VisaClient, VisaClientConfig

SANDBOX_HOST = "sandbox.api.visa.com"

# ISO 4217 numeric codes accepted by the Visa endpoint.
ISO_NUMERIC_CODES: dict[str, str] = {
    "AUD": "036",
    "CAD": "124",
    "CHF": "756",
    "CNY": "156",
    "EUR": "978",
    "GBP": "826",
    "HKD": "344",
    "INR": "356",
    "JPY": "392",
    "MXN": "484",
    "NZD": "554",
    "SEK": "752",
    "SGD": "702",
    "USD": "840",
}


class VisaProvider(BaseRateProvider):
    """Card-network quotes from visa.com.

    By default past days are requested with an ``effectiveDate``, which
    is what lets the card-network series be backfilled. Deployments whose
    endpoint only quotes the current rate declare ``DateSupport.TODAY_ONLY``.
    """

    name = "visa.com"

    def __init__(
        self,
        client: VisaClient,
        date_support: DateSupport = DateSupport.ANY_DATE,
        amount: Decimal | int | float = 1,
    ) -> None:
        self._client = client
        self.date_support = date_support
        self._amount = Decimal(str(amount))

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> VisaProvider:
        client_config = VisaClientConfig(
            url=str(config.get("VISA_API_URL")),
            user_pass=str(config.get("VISA_USER_PASS") or ""),
            cert_path=str(config.get("VISA_CERT_PATH", "visa-client-cert.pem")),
            key_path=str(config.get("VISA_KEY_PATH", "visa-client-key.pem")),
            timeout=float(config.get("REQUEST_TIMEOUT_SECONDS", 10)),
        )
        date_support = DateSupport(str(config.get("VISA_DATE_SUPPORT", "any_date")))
        amount = config.get("RATE_AMOUNT", 1)
        return cls(VisaClient(client_config), date_support=date_support, amount=amount)

    def get_rate(self, base: str, symbol: str, on: date) -> Decimal:
        payload = {
            "destinationCurrencyCode": self._numeric_code(symbol),
            "sourceCurrencyCode": self._numeric_code(base),
            "sourceAmount": format(self._amount.normalize(), "f"),
        }
        if self.date_support is DateSupport.ANY_DATE:
            payload["effectiveDate"] = on.isoformat()

        try:
            response = self._client.post(payload)
        except VisaAPIError as exc:
            raise ProviderError(str(exc)) from exc

        raw_rate = response["conversionRate"]
        try:
            rate = Decimal(str(raw_rate))
        except InvalidOperation as exc:
            raise ProviderError(f"Unparseable conversion rate {raw_rate!r} from Visa") from exc
        positive_rate(rate, "Visa")

        if urlparse(self._client.url).hostname == SANDBOX_HOST and rate <= 1:
            raise ProviderError("Fake rate returned from Visa API sandbox")

        return rate

    @staticmethod
    def _numeric_code(code: str) -> str:
        normalized = str(code or "").strip().upper()
        try:
            return ISO_NUMERIC_CODES[normalized]
        except KeyError as exc:
            raise ProviderError(f"Currency '{normalized}' is not supported by the Visa API.") from exc
