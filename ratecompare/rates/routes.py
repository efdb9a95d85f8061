"""Route for resolving one rate by source and calendar day."""

from __future__ import annotations

from datetime import date

from flask import current_app
from flask.views import MethodView

from ratecompare.errors import APIError, ValidationError
from ratecompare.providers.base import ProviderError
from ratecompare.schemas import RateResponseSchema
from ratecompare.services.resolver import get_resolver

from . import blp


@blp.route("/<string:source_name>/<string:day>")
class ResolvedRate(MethodView):
    @blp.response(200, RateResponseSchema())
    def get(self, source_name: str, day: str):
        try:
            on = date.fromisoformat(day)
        except ValueError as exc:
            raise ValidationError(
                f"Invalid date '{day}'. Expected YYYY-MM-DD.", payload={"field": "date"}
            ) from exc

        config = current_app.config
        resolver = get_resolver(current_app)
        try:
            resolver.provider_for_name(source_name)
        except ProviderError as exc:
            raise APIError(str(exc), status_code=404) from exc

        pair = resolver.get_or_create_pair(
            config["RATE_FROM_CURRENCY"], config["RATE_TO_CURRENCY"], config["RATE_AMOUNT"]
        )
        source = resolver.get_or_create_source(source_name)
        value, cached = resolver.resolve_rate_with_status(pair, source, on)

        return {
            "source": source.name,
            "pair": f"{pair.from_currency}/{pair.to_currency}",
            "date": on,
            "value": value,
            "cached": cached,
        }
