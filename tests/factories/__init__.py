"""Helper factories for building providers, clocks and stored rates in tests."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from ratecompare.providers.base import BaseRateProvider, DateSupport, ProviderError

DEFAULT_TODAY = date(2024, 3, 15)

RateItem = Decimal | str | Exception


@dataclass(slots=True)
class ProviderCall:
    """Record of a provider interaction captured for assertions."""

    base: str
    symbol: str
    on: date


class FixedClock:
    """Callable clock returning a settable calendar day."""

    def __init__(self, today: date = DEFAULT_TODAY) -> None:
        self.current = today

    def __call__(self) -> date:
        return self.current

    def advance(self, days: int = 1) -> date:
        self.current = self.current + timedelta(days=days)
        return self.current

    def offset(self, days: int) -> date:
        return self.current + timedelta(days=days)


class ScriptedProvider(BaseRateProvider):
    """Provider answering from a per-day script, with a default for unscripted days.

    A day may be scripted with a single value, an exception to raise, or an
    iterable of items consumed one per call.
    """

    def __init__(
        self,
        name: str,
        date_support: DateSupport = DateSupport.ANY_DATE,
        rates: Mapping[date, RateItem | Iterable[RateItem]] | None = None,
        default: RateItem | None = None,
    ) -> None:
        self.name = name
        self.date_support = date_support
        self._script: dict[date, deque[RateItem]] = {}
        for day, item in (rates or {}).items():
            if isinstance(item, (str, Decimal, Exception)):
                self._script[day] = deque([item])
            else:
                self._script[day] = deque(item)
        self._default = default
        self.calls: list[ProviderCall] = []

    def get_rate(self, base: str, symbol: str, on: date) -> Decimal:
        self.calls.append(ProviderCall(base=base, symbol=symbol, on=on))
        queue = self._script.get(on)
        if queue:
            item = queue.popleft() if len(queue) > 1 else queue[0]
        elif self._default is not None:
            item = self._default
        else:
            raise ProviderError(f"{self.name} has no rate for {on.isoformat()}")
        if isinstance(item, Exception):
            raise item
        return Decimal(str(item))

    def calls_on(self, on: date) -> int:
        return sum(1 for call in self.calls if call.on == on)
