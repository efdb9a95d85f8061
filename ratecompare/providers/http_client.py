"""Shared HTTP client wrapper used by the provider clients."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

import requests
from requests import Response, Session
from requests.exceptions import JSONDecodeError, RequestException

logger = logging.getLogger(__name__)


class HTTPClientError(RuntimeError):
    """Raised when the HTTP client cannot satisfy a request."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class HTTPClientConfig:
    """Configuration for the shared HTTP client."""

    base_url: str
    timeout: float = 10.0
    cert: Optional[Tuple[str, str]] = None
    auth: Optional[Tuple[str, str]] = None


class HTTPClient:
    """Small JSON-over-HTTP client; every call is a single attempt."""

    def __init__(
        self,
        config: HTTPClientConfig,
        session: Optional[Session] = None,
    ) -> None:
        self._config = config
        self._session = session or requests.Session()

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        url = self._build_url(path)
        try:
            response = self._session.get(
                url,
                params=params,
                timeout=self._config.timeout,
                headers={"Accept": "application/json"},
                **self._tls_options(),
            )
        except RequestException as exc:
            logger.warning("HTTP GET %s failed: %s", url, exc)
            raise HTTPClientError(f"Failed to fetch {url}: {exc}") from exc
        return self._handle_response(response)

    def post(self, path: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
        url = self._build_url(path)
        try:
            response = self._session.post(
                url,
                json=dict(payload),
                timeout=self._config.timeout,
                headers={"Accept": "application/json"},
                **self._tls_options(),
            )
        except RequestException as exc:
            logger.warning("HTTP POST %s failed: %s", url, exc)
            raise HTTPClientError(f"Failed to post to {url}: {exc}") from exc
        return self._handle_response(response)

    def _tls_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {}
        if self._config.cert is not None:
            options["cert"] = self._config.cert
        if self._config.auth is not None:
            options["auth"] = self._config.auth
        return options

    def _build_url(self, path: str) -> str:
        base = self._config.base_url.rstrip("/")
        suffix = path.lstrip("/")
        if not suffix:
            return base
        return f"{base}/{suffix}"

    @staticmethod
    def _handle_response(response: Response) -> Dict[str, Any]:
        status = response.status_code
        if status >= 500:
            raise HTTPClientError(f"Server error {status}", status_code=status)
        if status >= 400:
            raise HTTPClientError(f"Client error {status}: {response.text}", status_code=status)

        try:
            payload: Dict[str, Any] = response.json()
        except (JSONDecodeError, ValueError) as exc:
            raise HTTPClientError("Invalid JSON response", status_code=status) from exc

        return payload
