"""Application factory for the rate comparison service."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Flask
from flask_smorest import Api

from config import get_config
from .database import init_app as init_db
from .cli import register_cli


def create_app(config_name: str | None = None, overrides: Mapping[str, Any] | None = None) -> Flask:
    """Application factory adhering to the Flask app factory pattern.

    ``overrides`` is applied on top of the selected config class before
    any extension reads it (tests use it to point at a scratch database).
    """

    app = Flask(__name__)
    config_class = get_config(config_name)
    app.config.from_object(config_class)
    if overrides:
        app.config.update(overrides)

    _configure_logging(app)
    _configure_api(app)
    api = _register_extensions(app)
    _register_blueprints(app, api)
    _register_error_handlers(app)

    register_cli(app)
    return app


def _configure_logging(app: Flask) -> None:
    from .logging import init_request_logging, setup_logging

    setup_logging(app)
    init_request_logging(app)


def _configure_api(app: Flask) -> None:
    app.config.setdefault("API_TITLE", "Rate Compare API")
    app.config.setdefault("API_VERSION", "v1")
    app.config.setdefault("OPENAPI_VERSION", "3.0.3")
    app.config.setdefault("OPENAPI_URL_PREFIX", "/docs")
    app.config.setdefault("OPENAPI_SWAGGER_UI_PATH", "/")
    app.config.setdefault(
        "OPENAPI_SWAGGER_UI_URL",
        "https://cdn.jsdelivr.net/npm/swagger-ui-dist/",
    )


def _register_extensions(app: Flask) -> Api:
    """Initialise the database, the providers and the rate resolver."""

    init_db(app)
    from . import models  # noqa: F401  # Ensure models are imported for metadata
    from .providers.registry import init_providers
    from .services.resolver import init_resolver

    init_providers(app)
    init_resolver(app)

    api = Api(app)
    app.extensions["smorest_api"] = api
    return api


def _register_blueprints(app: Flask, api: Api) -> None:
    """Register Flask blueprints."""

    from .health import blp as health_blp
    from .rates import blp as rates_blp
    from .report import blp as report_blp

    api.register_blueprint(health_blp, url_prefix="/health")
    api.register_blueprint(report_blp, url_prefix="/report")
    api.register_blueprint(rates_blp, url_prefix="/rates")


def _register_error_handlers(app: Flask) -> None:
    """Register global error handlers."""

    from .errors import register_error_handlers

    register_error_handlers(app)
