from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
import responses
from responses import matchers

from ratecompare.providers.base import DateSupport, ProviderError
from ratecompare.providers.visa_client import VisaAPIError, VisaClient, VisaClientConfig
from ratecompare.providers.visa_provider import VisaProvider
from tests.fixtures import load_json

PRODUCTION_URL = "https://api.visa.com/forexrates/v1/foreignexchangerates"
SANDBOX_URL = "https://sandbox.api.visa.com/forexrates/v1/foreignexchangerates"


def make_provider(url: str, date_support: DateSupport = DateSupport.TODAY_ONLY) -> VisaProvider:
    config = VisaClientConfig(
        url=url,
        user_pass="visa-user:visa-pass",
        cert_path="cert.pem",
        key_path="key.pem",
        timeout=2,
    )
    return VisaProvider(VisaClient(config), date_support=date_support)


def test_client_config_splits_credentials():
    config = VisaClientConfig(url=PRODUCTION_URL, user_pass="u:p:x", cert_path="c", key_path="k", timeout=1)

    assert config.auth == ("u", "p:x")
    assert VisaClientConfig(PRODUCTION_URL, "", "c", "k", 1).auth is None


@responses.activate
def test_get_rate_posts_numeric_currency_codes():
    responses.add(
        responses.POST,
        PRODUCTION_URL,
        json=load_json("visa_conversion.json"),
        match=[
            matchers.json_params_matcher(
                {
                    "destinationCurrencyCode": "124",
                    "sourceCurrencyCode": "840",
                    "sourceAmount": "1",
                }
            )
        ],
        status=200,
    )
    provider = make_provider(PRODUCTION_URL)

    rate = provider.get_rate("USD", "CAD", date(2024, 3, 15))

    assert rate == Decimal("1.3712")


@responses.activate
def test_any_date_variant_sends_effective_date():
    responses.add(
        responses.POST,
        PRODUCTION_URL,
        json=load_json("visa_conversion.json"),
        match=[
            matchers.json_params_matcher(
                {
                    "destinationCurrencyCode": "124",
                    "sourceCurrencyCode": "840",
                    "sourceAmount": "1",
                    "effectiveDate": "2024-03-01",
                }
            )
        ],
        status=200,
    )
    provider = make_provider(PRODUCTION_URL, DateSupport.ANY_DATE)

    assert provider.get_rate("USD", "CAD", date(2024, 3, 1)) == Decimal("1.3712")


@responses.activate
def test_sandbox_fake_rate_is_rejected():
    responses.add(responses.POST, SANDBOX_URL, json=load_json("visa_sandbox_fake.json"), status=200)
    provider = make_provider(SANDBOX_URL)

    with pytest.raises(ProviderError, match="Fake rate"):
        provider.get_rate("USD", "CAD", date(2024, 3, 15))


@responses.activate
def test_missing_conversion_rate_raises():
    responses.add(responses.POST, PRODUCTION_URL, json={"destinationAmount": "1.37"}, status=200)
    provider = make_provider(PRODUCTION_URL)

    with pytest.raises(ProviderError, match="conversionRate"):
        provider.get_rate("USD", "CAD", date(2024, 3, 15))


@pytest.mark.parametrize("value", ["0", "-1.37", "NaN"])
@responses.activate
def test_invalid_conversion_rate_raises(value):
    responses.add(responses.POST, PRODUCTION_URL, json={"conversionRate": value}, status=200)
    provider = make_provider(PRODUCTION_URL)

    with pytest.raises(ProviderError, match="invalid rate"):
        provider.get_rate("USD", "CAD", date(2024, 3, 15))


@responses.activate
def test_http_error_raises_provider_error():
    responses.add(responses.POST, PRODUCTION_URL, body="denied", status=401)
    provider = make_provider(PRODUCTION_URL)

    with pytest.raises(ProviderError, match="Client error 401"):
        provider.get_rate("USD", "CAD", date(2024, 3, 15))


def test_unknown_currency_raises_before_request():
    client = MagicMock(spec=VisaClient)
    provider = VisaProvider(client)

    with pytest.raises(ProviderError, match="not supported"):
        provider.get_rate("USD", "XYZ", date(2024, 3, 15))
    client.post.assert_not_called()


def test_missing_certificate_surfaces_as_visa_error():
    http_client = MagicMock()
    http_client.post.side_effect = OSError("Could not find the TLS certificate file")
    config = VisaClientConfig(PRODUCTION_URL, "u:p", "missing.pem", "missing-key.pem", 1)
    client = VisaClient(config, client=http_client)

    with pytest.raises(VisaAPIError, match="certificate"):
        client.post({"sourceAmount": "1"})


def test_from_config_reads_date_support_and_amount():
    provider = VisaProvider.from_config(
        {
            "VISA_API_URL": PRODUCTION_URL,
            "VISA_USER_PASS": "u:p",
            "VISA_DATE_SUPPORT": "any_date",
            "RATE_AMOUNT": 100.0,
        }
    )

    assert provider.date_support is DateSupport.ANY_DATE
    assert provider._amount == Decimal("100")
    assert provider.supports(date(2020, 1, 1), date(2024, 1, 1)) is True
