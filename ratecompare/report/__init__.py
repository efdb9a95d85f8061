"""Blueprint for the rate comparison report."""

from __future__ import annotations

from flask_smorest import Blueprint

blp = Blueprint("Report", __name__, description="Card-network versus historical API comparison")

from . import routes  # noqa: E402,F401
