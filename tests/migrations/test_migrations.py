"""Smoke tests for Alembic migrations."""

from __future__ import annotations

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

PROJECT_ROOT = Path(__file__).resolve().parents[2]
ALEMBIC_CONFIG_PATH = PROJECT_ROOT / "alembic.ini"

TABLES = {"rate_sources", "rate_pairs", "rates"}


@pytest.fixture()
def alembic_config(tmp_path):
    """Provide an Alembic config pointing to a temporary SQLite database."""

    config = Config(str(ALEMBIC_CONFIG_PATH))
    config.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    db_path = tmp_path / "test.db"
    config.set_main_option("sqlalchemy.url", f"sqlite:///{db_path}")
    return config


def test_alembic_upgrade_and_downgrade(alembic_config):
    """Ensure migrations upgrade and downgrade cleanly on a blank database."""

    command.upgrade(alembic_config, "head")

    engine = create_engine(alembic_config.get_main_option("sqlalchemy.url"))
    inspector = inspect(engine)
    assert TABLES <= set(inspector.get_table_names())
    rate_constraints = {
        constraint["name"] for constraint in inspector.get_unique_constraints("rates")
    }
    assert "uq_rates_pair_source_date" in rate_constraints

    command.downgrade(alembic_config, "base")

    assert not TABLES & set(inspect(engine).get_table_names())
    engine.dispose()
