"""Abstract interface for rate providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from enum import Enum


class ProviderError(Exception):
    """Raised when an upstream provider cannot fulfill a request."""


class UnsupportedDateError(ProviderError):
    """Raised when a today-only provider is asked for another calendar day."""

    def __init__(self, provider: str, requested: date, today: date) -> None:
        super().__init__(
            f"Provider '{provider}' only provides the current rate "
            f"(requested {requested.isoformat()}, today is {today.isoformat()})"
        )
        self.provider = provider
        self.requested = requested
        self.today = today


class DateSupport(str, Enum):
    """Which calendar days a provider can quote."""

    ANY_DATE = "any_date"
    TODAY_ONLY = "today_only"


class BaseRateProvider(ABC):
    """Defines the interface all rate providers must implement.

    ``name`` doubles as the rate source name the provider is registered
    under, and ``date_support`` declares whether historical days can be
    requested at all.
    """

    name: str
    date_support: DateSupport = DateSupport.ANY_DATE

    def supports(self, on: date, today: date) -> bool:
        """Return whether a rate for ``on`` can be fetched given ``today``."""

        if self.date_support is DateSupport.TODAY_ONLY:
            return on == today
        return True

    @abstractmethod
    def get_rate(self, base: str, symbol: str, on: date) -> Decimal:
        """Retrieve the rate converting one unit of ``base`` into ``symbol`` on ``on``."""


def positive_rate(value: Decimal, provider: str) -> Decimal:
    """Return ``value`` if it is a usable rate, else raise :class:`ProviderError`."""

    if not value.is_finite() or value <= 0:
        raise ProviderError(f"{provider} returned an invalid rate {value}")
    return value
