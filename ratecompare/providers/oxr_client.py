from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from ratecompare.providers.http_client import HTTPClient, HTTPClientConfig, HTTPClientError

logger = logging.getLogger(__name__)


class OpenExchangeRatesError(RuntimeError):
    """Raised when the Open Exchange Rates API returns an error response."""


class OpenExchangeRatesClientConfig:
    """Configuration parameters for the API client."""

    def __init__(self, base_url: str, app_id: str, timeout: float) -> None:
        self.base_url = base_url
        self.app_id = app_id
        self.timeout = timeout


class OpenExchangeRatesClient:
    """HTTP client for openexchangerates.org built on the shared HTTP wrapper."""

    def __init__(
        self, config: OpenExchangeRatesClientConfig, client: Optional[HTTPClient] = None
    ) -> None:
        self._config = config
        self._client = client or HTTPClient(
            HTTPClientConfig(base_url=config.base_url, timeout=config.timeout)
        )

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        query = dict(params or {})
        query["app_id"] = self._config.app_id
        try:
            payload = self._client.get(path, params=query)
        except HTTPClientError as exc:
            raise OpenExchangeRatesError(str(exc)) from exc

        if payload.get("error"):
            description = payload.get("description") or payload.get("message") or "unknown error"
            raise OpenExchangeRatesError(f"Open Exchange Rates error payload: {description}")

        return payload
