"""Blueprint for resolving single rates."""

from __future__ import annotations

from flask_smorest import Blueprint

blp = Blueprint("Rates", __name__, description="Resolve a stored or freshly fetched rate")

from . import routes  # noqa: E402,F401
