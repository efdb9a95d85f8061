"""Domain errors and the Flask handlers that render them."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from flask import Flask, jsonify

from ratecompare.providers.base import ProviderError, UnsupportedDateError

logger = logging.getLogger(__name__)


class RateCompareError(Exception):
    """Base class for rate resolution errors."""


class RateExistsError(RateCompareError):
    """Raised by the strict insert when the pair/source/date key is taken."""

    def __init__(self, pair_id: int, source_name: str, on: date) -> None:
        super().__init__(
            f"Rate already exists for pair {pair_id}, source '{source_name}' on {on.isoformat()}"
        )
        self.pair_id = pair_id
        self.source_name = source_name
        self.on = on


class NoRatesFoundError(RateCompareError):
    """Raised when no rate is on record to anchor a report window."""

    def __init__(self, source_name: str) -> None:
        super().__init__(f"No rates found for source '{source_name}'")
        self.source_name = source_name


class APIError(Exception):
    """Base class for API-level errors."""

    status_code: int = 400

    def __init__(
        self, message: str, *, status_code: int | None = None, payload: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload or {}


class ValidationError(APIError):
    """Error raised for validation failures."""

    status_code = 422


DEFAULT_STATUS_MESSAGES: dict[int, str] = {
    400: "Request could not be processed.",
    404: "Resource not found.",
    409: "Request conflicts with stored rates.",
    422: "Submitted data is invalid.",
    502: "Upstream provider unavailable.",
}


def register_error_handlers(app: Flask) -> None:
    """Attach error handlers to the Flask application."""

    @app.errorhandler(APIError)
    def handle_api_error(error: APIError):
        message = error.message or DEFAULT_STATUS_MESSAGES.get(error.status_code, "Request failed.")
        response = {"message": message}
        if error.payload:
            response.update(error.payload)
        return jsonify(response), error.status_code

    @app.errorhandler(NoRatesFoundError)
    def handle_no_rates(error: NoRatesFoundError):
        return jsonify({"message": str(error), "source": error.source_name}), 404

    @app.errorhandler(RateCompareError)
    def handle_rate_conflict(error: RateCompareError):
        return jsonify({"message": str(error) or DEFAULT_STATUS_MESSAGES[409]}), 409

    @app.errorhandler(UnsupportedDateError)
    def handle_unsupported_date(error: UnsupportedDateError):
        return jsonify({"message": str(error), "provider": error.provider}), 422

    @app.errorhandler(ProviderError)
    def handle_provider_error(error: ProviderError):
        logger.error("Provider failure surfaced to client: %s", error)
        return jsonify({"message": str(error) or DEFAULT_STATUS_MESSAGES[502]}), 502
