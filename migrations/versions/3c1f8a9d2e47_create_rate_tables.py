"""create rate tables

Revision ID: 3c1f8a9d2e47
Revises:
Create Date: 2026-10-19 10:12:31.204118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c1f8a9d2e47'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "rate_sources",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "rate_pairs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("from_currency", sa.String(length=12), nullable=False),
        sa.Column("to_currency", sa.String(length=12), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "from_currency",
            "to_currency",
            "amount",
            name="uq_rate_pairs_identity",
        ),
    )
    op.create_table(
        "rates",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("rate_pair_id", sa.Integer(), nullable=False),
        sa.Column("rate_source_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("value", sa.Numeric(precision=18, scale=8), nullable=False),
        sa.ForeignKeyConstraint(
            ["rate_pair_id"], ["rate_pairs.id"], ondelete="RESTRICT"
        ),
        sa.ForeignKeyConstraint(
            ["rate_source_id"], ["rate_sources.id"], ondelete="RESTRICT"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "rate_pair_id",
            "rate_source_id",
            "date",
            name="uq_rates_pair_source_date",
        ),
    )
    op.create_index(
        "ix_rates_pair_source_date_desc",
        "rates",
        [
            sa.column("rate_pair_id"),
            sa.column("rate_source_id"),
            sa.text("date DESC"),
        ],
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_rates_pair_source_date_desc", table_name="rates")
    op.drop_table("rates")
    op.drop_table("rate_pairs")
    op.drop_table("rate_sources")
