"""Application configuration classes."""

from __future__ import annotations

import os

SUPPORTED_DATE_SUPPORT = {"any_date", "today_only"}
SUPPORTED_WINDOW_ORIENTATIONS = {"before_anchor", "ending_at_anchor"}


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value is not None else default


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "rate-compare"
    SECRET_KEY = _get_env("SECRET_KEY", "change-me")
    SQLALCHEMY_DATABASE_URI = _get_env("DATABASE_URL", "sqlite:///rate-compare.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    REQUEST_TIMEOUT_SECONDS = int(_get_env("REQUEST_TIMEOUT_SECONDS", "10"))

    RATE_FROM_CURRENCY = _get_env("RATE_FROM_CURRENCY", "USD")
    RATE_TO_CURRENCY = _get_env("RATE_TO_CURRENCY", "CAD")
    RATE_AMOUNT = float(_get_env("RATE_AMOUNT", "1"))

    OXR_API_BASE_URL = _get_env("OXR_API_BASE_URL", "https://openexchangerates.org/api")
    OXR_APP_ID = _get_env("OXR_APP_ID", "")
    VISA_API_URL = _get_env(
        "VISA_API_URL", "https://sandbox.api.visa.com/forexrates/v1/foreignexchangerates"
    )
    VISA_USER_PASS = _get_env("VISA_USER_PASS", "")
    VISA_CERT_PATH = _get_env("VISA_CERT_PATH", "visa-client-cert.pem")
    VISA_KEY_PATH = _get_env("VISA_KEY_PATH", "visa-client-key.pem")
    VISA_DATE_SUPPORT = _get_env("VISA_DATE_SUPPORT", "any_date")
    RATE_PROVIDERS_MOCK = _get_env("RATE_PROVIDERS_MOCK", "false").lower() == "true"

    REPORT_WINDOW_DAYS = int(_get_env("REPORT_WINDOW_DAYS", "31"))
    REPORT_WINDOW_ORIENTATION = _get_env("REPORT_WINDOW_ORIENTATION", "before_anchor")
    BACKFILL_SOURCE = _get_env("BACKFILL_SOURCE", "visa.com")
    BACKFILL_START_OFFSET = int(_get_env("BACKFILL_START_OFFSET", "-31"))
    BACKFILL_END_OFFSET = int(_get_env("BACKFILL_END_OFFSET", "-1"))

    LOG_LEVEL = _get_env("LOG_LEVEL", "INFO")
    LOG_JSON_ENABLED = _get_env("LOG_JSON_ENABLED", "false").lower() == "true"
    LOG_FORMAT = _get_env("LOG_FORMAT", "%(asctime)s %(levelname)s [%(name)s] %(message)s")


class DevelopmentConfig(BaseConfig):
    """Configuration for local development."""

    DEBUG = True
    TESTING = False


class ProductionConfig(BaseConfig):
    """Configuration for production deployments."""

    DEBUG = False
    TESTING = False


class TestingConfig(BaseConfig):
    """Configuration used by the test-suite; providers are always mocked."""

    DEBUG = False
    TESTING = True
    RATE_PROVIDERS_MOCK = True


CONFIG_BY_ENV = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config(config_name: str | None = None) -> type[BaseConfig]:
    """Return the config class for the requested environment.

    Args:
        config_name: Optional explicit config identifier. If omitted, the
            APP_ENV environment variable is consulted.

    Raises:
        KeyError: If the requested configuration is not defined.
        ValueError: If a configured option holds an unsupported value.
    """

    env_candidate = config_name if config_name is not None else os.getenv("APP_ENV", "development")
    env_name = (env_candidate or "development").lower()
    try:
        config_cls = CONFIG_BY_ENV[env_name]
    except KeyError as exc:
        raise KeyError(f"Unknown APP_ENV '{env_name}'") from exc

    _validate_options(config_cls)
    return config_cls


def _validate_options(config_cls: type[BaseConfig]) -> None:
    date_support = (config_cls.VISA_DATE_SUPPORT or "").strip().lower()
    if date_support not in SUPPORTED_DATE_SUPPORT:
        raise ValueError(
            f"Unsupported VISA_DATE_SUPPORT '{config_cls.VISA_DATE_SUPPORT}'. "
            f"Allowed values: {sorted(SUPPORTED_DATE_SUPPORT)}"
        )
    config_cls.VISA_DATE_SUPPORT = date_support

    orientation = (config_cls.REPORT_WINDOW_ORIENTATION or "").strip().lower()
    if orientation not in SUPPORTED_WINDOW_ORIENTATIONS:
        raise ValueError(
            f"Unsupported REPORT_WINDOW_ORIENTATION '{config_cls.REPORT_WINDOW_ORIENTATION}'. "
            f"Allowed values: {sorted(SUPPORTED_WINDOW_ORIENTATIONS)}"
        )
    config_cls.REPORT_WINDOW_ORIENTATION = orientation

    if config_cls.REPORT_WINDOW_DAYS <= 0:
        raise ValueError("REPORT_WINDOW_DAYS must be a positive integer")
