"""SQLAlchemy engine and session wiring for the rate store."""

from __future__ import annotations

from typing import Optional

from flask import Flask
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, scoped_session, sessionmaker


class Base(DeclarativeBase):
    """Declarative base for rate pairs, rate sources and rates."""


# One session per thread, shared by the rate store and the request handlers.
# Records outlive the commit that created them (get-or-create returns them).
SessionLocal = scoped_session(sessionmaker(autoflush=False, expire_on_commit=False))

_engine: Optional[Engine] = None


def init_app(app: Flask) -> Engine:
    """Bind the session factory to ``SQLALCHEMY_DATABASE_URI`` once per process."""

    global _engine

    if _engine is None:
        _engine = create_engine(app.config["SQLALCHEMY_DATABASE_URI"])
        SessionLocal.configure(bind=_engine)

    app.teardown_appcontext(_remove_session)
    app.extensions["sqlalchemy_engine"] = _engine
    return _engine


def _remove_session(_: Optional[BaseException] = None) -> None:
    SessionLocal.remove()


def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError("Rate store engine is not initialised; call init_app first.")
    return _engine


def get_session() -> scoped_session:
    return SessionLocal
