"""Shared pytest fixtures."""

from __future__ import annotations

import json
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from ratecompare import create_app  # noqa: E402
from ratecompare.database import SessionLocal, get_engine  # noqa: E402
from ratecompare.models import Rate, RatePair, RateSource  # noqa: E402
from ratecompare.services.rate_store import RateStore  # noqa: E402
from ratecompare.services.resolver import RESOLVER_EXT_KEY, RateResolver  # noqa: E402
from tests.factories import FixedClock  # noqa: E402


def alembic_config_for(database_url: str) -> Config:
    """Alembic config bound to ``database_url`` regardless of the working directory."""

    config = Config(str(ROOT_DIR / "alembic.ini"))
    config.set_main_option("script_location", str(ROOT_DIR / "migrations"))
    config.set_main_option("sqlalchemy.url", database_url)
    return config


@pytest.fixture(scope="session")
def app(tmp_path_factory: pytest.TempPathFactory) -> Iterator:
    """Session-wide Flask application configured with a temporary database."""

    db_dir = tmp_path_factory.mktemp("db")
    database_url = f"sqlite:///{db_dir / 'test.db'}"

    alembic_cfg = alembic_config_for(database_url)
    command.upgrade(alembic_cfg, "head")

    flask_app = create_app("testing", overrides={"SQLALCHEMY_DATABASE_URI": database_url})

    yield flask_app

    engine = get_engine()
    SessionLocal.remove()
    engine.dispose()
    command.downgrade(alembic_cfg, "base")


@pytest.fixture()
def db_session(app) -> Iterator:
    """Provide the scoped session and empty every rate table afterwards."""

    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.query(Rate).delete()
        session.query(RatePair).delete()
        session.query(RateSource).delete()
        session.commit()
        SessionLocal.remove()


@pytest.fixture()
def client(app, db_session):
    """Provide a Flask test client."""

    with app.test_client() as client:
        yield client


@pytest.fixture()
def store(db_session) -> RateStore:
    return RateStore()


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture()
def make_resolver(store: RateStore, clock: FixedClock) -> Callable[..., RateResolver]:
    """Build a resolver over the test database with the given providers and fixed clock."""

    def _factory(*providers) -> RateResolver:
        return RateResolver(
            store=store,
            providers={provider.name: provider for provider in providers},
            today=clock,
        )

    return _factory


@pytest.fixture()
def install_resolver(app) -> Iterator[Callable[[RateResolver], RateResolver]]:
    """Swap the app's resolver for the duration of a test."""

    original = app.extensions[RESOLVER_EXT_KEY]

    def _install(resolver: RateResolver) -> RateResolver:
        app.extensions[RESOLVER_EXT_KEY] = resolver
        return resolver

    yield _install
    app.extensions[RESOLVER_EXT_KEY] = original


@pytest.fixture(scope="session")
def fixtures_dir() -> Path:
    """Return the path to bundled JSON fixtures."""

    return ROOT_DIR / "tests" / "fixtures"


@pytest.fixture()
def load_json_fixture(fixtures_dir: Path) -> Callable[[str], dict]:
    """Load a JSON fixture by filename."""

    def _loader(filename: str) -> dict:
        path = fixtures_dir / filename
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)

    return _loader
