"""SQLAlchemy ORM models for rate pairs, rate sources and stored rates."""

from __future__ import annotations

import datetime
from decimal import Decimal

from sqlalchemy import Date, Float, ForeignKey, Index, Integer, Numeric, String, UniqueConstraint, desc
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ratecompare.database import Base


class RateSource(Base):
    """A named rate provider such as ``openexchangerates.org``."""

    __tablename__ = "rate_sources"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<RateSource name={self.name}>"


class RatePair(Base):
    """Currency conversion identity: from, to and base amount."""

    __tablename__ = "rate_pairs"
    __table_args__ = (
        UniqueConstraint(
            "from_currency",
            "to_currency",
            "amount",
            name="uq_rate_pairs_identity",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    from_currency: Mapped[str] = mapped_column(String(12), nullable=False)
    to_currency: Mapped[str] = mapped_column(String(12), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<RatePair {self.from_currency}->{self.to_currency} amount={self.amount}>"


class Rate(Base):
    """Rate value observed for a pair, from a source, on a calendar day."""

    __tablename__ = "rates"
    __table_args__ = (
        UniqueConstraint(
            "rate_pair_id",
            "rate_source_id",
            "date",
            name="uq_rates_pair_source_date",
        ),
        Index(
            "ix_rates_pair_source_date_desc",
            "rate_pair_id",
            "rate_source_id",
            desc("date"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    rate_pair_id: Mapped[int] = mapped_column(
        ForeignKey("rate_pairs.id", ondelete="RESTRICT"),
        nullable=False,
    )
    rate_source_id: Mapped[int] = mapped_column(
        ForeignKey("rate_sources.id", ondelete="RESTRICT"),
        nullable=False,
    )
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    value: Mapped[Decimal] = mapped_column(Numeric(18, 8), nullable=False)

    rate_pair: Mapped["RatePair"] = relationship("RatePair")
    rate_source: Mapped["RateSource"] = relationship("RateSource")

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return (
            f"<Rate pair={self.rate_pair_id} source={self.rate_source_id} "
            f"{self.date.isoformat()} value={self.value}>"
        )
