from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ratecompare.providers.http_client import HTTPClient, HTTPClientConfig, HTTPClientError

logger = logging.getLogger(__name__)


class VisaAPIError(RuntimeError):
    """Raised when the Visa foreign exchange API returns an error response."""


class VisaClientConfig:
    """Configuration parameters for the Visa client."""

    def __init__(
        self,
        url: str,
        user_pass: str,
        cert_path: str,
        key_path: str,
        timeout: float,
    ) -> None:
        self.url = url
        self.user_pass = user_pass
        self.cert_path = cert_path
        self.key_path = key_path
        self.timeout = timeout

    @property
    def auth(self) -> tuple[str, str] | None:
        if not self.user_pass:
            return None
        user, _, password = self.user_pass.partition(":")
        return user, password


class VisaClient:
    """Mutual-TLS JSON client for the Visa foreign exchange rates endpoint."""

    def __init__(
        self,
        config: VisaClientConfig,
        client: HTTPClient | None = None,
    ) -> None:
        self._config = config
        self._client = client or HTTPClient(
            HTTPClientConfig(
                base_url=config.url,
                timeout=config.timeout,
                cert=(config.cert_path, config.key_path),
                auth=config.auth,
            )
        )

    @property
    def url(self) -> str:
        return self._config.url

    def post(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        try:
            response = self._client.post("", payload)
        except HTTPClientError as exc:
            raise VisaAPIError(str(exc)) from exc
        except OSError as exc:
            # requests raises plain OSError when the client certificate cannot be loaded.
            raise VisaAPIError(f"Unable to load Visa client certificate: {exc}") from exc

        if "conversionRate" not in response:
            raise VisaAPIError("Visa API response missing 'conversionRate' field")

        return response
