"""Mock provider implementation for testing and local development."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from .base import BaseRateProvider, DateSupport


class MockRateProvider(BaseRateProvider):
    """Deterministic provider returning synthetic rates for any source name."""

    def __init__(
        self,
        name: str = "mock",
        date_support: DateSupport = DateSupport.ANY_DATE,
        base_rate: Decimal | str = "1.30",
    ) -> None:
        self.name = name
        self.date_support = date_support
        self._base_rate = Decimal(str(base_rate))

    def get_rate(self, base: str, symbol: str, on: date) -> Decimal:
        if str(base).upper() == str(symbol).upper():
            return Decimal("1")
        # Oscillates gently around the base rate on a ten-day cycle.
        step = Decimal((on.toordinal() % 10) - 5) * Decimal("0.002")
        return self._base_rate + step
