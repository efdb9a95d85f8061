"""Provider interfaces and clients for the rate sources."""

from .base import BaseRateProvider, DateSupport, ProviderError, UnsupportedDateError
from .mock import MockRateProvider
from .oxr_client import (
    OpenExchangeRatesClient,
    OpenExchangeRatesClientConfig,
    OpenExchangeRatesError,
)
from .oxr_provider import OpenExchangeRatesProvider
from .visa_client import VisaAPIError, VisaClient, VisaClientConfig
from .visa_provider import VisaProvider

__all__ = [
    "BaseRateProvider",
    "DateSupport",
    "ProviderError",
    "UnsupportedDateError",
    "MockRateProvider",
    "OpenExchangeRatesClient",
    "OpenExchangeRatesClientConfig",
    "OpenExchangeRatesError",
    "OpenExchangeRatesProvider",
    "VisaAPIError",
    "VisaClient",
    "VisaClientConfig",
    "VisaProvider",
]
