"""Route handlers for health checks."""

from __future__ import annotations

import logging

from flask import current_app
from flask.views import MethodView
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ratecompare.database import get_session
from ratecompare.schemas import HealthStatusSchema

from . import blp

logger = logging.getLogger(__name__)


@blp.route("")
class HealthStatus(MethodView):
    @blp.response(200, HealthStatusSchema())
    def get(self):
        session = get_session()
        try:
            session.execute(text("SELECT 1"))
            database = "ok"
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Health check could not reach the rate store: %s", exc)
            database = "unavailable"

        return {
            "status": "ok" if database == "ok" else "degraded",
            "app": current_app.config.get("APP_NAME", "rate-compare"),
            "database": database,
        }
