"""Persistence for rate pairs, rate sources and stored rate values."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ratecompare.database import get_session
from ratecompare.models import Rate, RatePair, RateSource

SessionFactory = Callable[[], Session]


class RateStore:
    """Keyed lookups and inserts over the three record kinds.

    Lookups return ``None`` when nothing matches. Inserts commit
    immediately; on any database error the session is rolled back and
    the error is re-raised (``IntegrityError`` for a unique-key clash).
    """

    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session_factory = session_factory or get_session()

    @property
    def session(self) -> Session:
        return self._session_factory()

    def find_pair(self, from_currency: str, to_currency: str, amount: float) -> Optional[RatePair]:
        return (
            self.session.query(RatePair)
            .filter_by(from_currency=from_currency, to_currency=to_currency, amount=amount)
            .one_or_none()
        )

    def insert_pair(self, from_currency: str, to_currency: str, amount: float) -> RatePair:
        pair = RatePair(from_currency=from_currency, to_currency=to_currency, amount=amount)
        self._insert(pair)
        return pair

    def find_source(self, name: str) -> Optional[RateSource]:
        return self.session.query(RateSource).filter_by(name=name).one_or_none()

    def insert_source(self, name: str) -> RateSource:
        source = RateSource(name=name)
        self._insert(source)
        return source

    def find_rate(self, pair_id: int, source_id: int, on: date) -> Optional[Rate]:
        return (
            self.session.query(Rate)
            .filter_by(rate_pair_id=pair_id, rate_source_id=source_id, date=on)
            .one_or_none()
        )

    def insert_rate(self, pair_id: int, source_id: int, on: date, value: Decimal) -> Rate:
        rate = Rate(rate_pair_id=pair_id, rate_source_id=source_id, date=on, value=value)
        self._insert(rate)
        return rate

    def find_most_recent_rate(self, pair_id: int, source_id: int) -> Optional[Rate]:
        return (
            self.session.query(Rate)
            .filter_by(rate_pair_id=pair_id, rate_source_id=source_id)
            .order_by(desc(Rate.date))
            .limit(1)
            .one_or_none()
        )

    def count_rates(self, pair_id: int, source_id: int) -> int:
        return (
            self.session.query(Rate)
            .filter_by(rate_pair_id=pair_id, rate_source_id=source_id)
            .count()
        )

    def _insert(self, record) -> None:
        session = self.session
        session.add(record)
        try:
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            raise
