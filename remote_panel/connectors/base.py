"""
remote_panel/connectors/base.py

Shared HTTP mechanics for Google API connectors.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any

import requests

from remote_panel.config import SheetsHTTPSettings

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class ConnectorRequestError(RuntimeError):
    """
    Raised when a connector request fails (after retries, when enabled).
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BaseHTTPConnector:
    """
    JSON-over-HTTP request helper with rate limiting and optional backoff.
    """

    name: str

    def __init__(
        self,
        *,
        name: str,
        http_settings: SheetsHTTPSettings,
        session: requests.Session | None,
    ) -> None:
        self.name = name
        self._session = session
        self._timeout_seconds = http_settings.timeout_seconds
        self._max_retries = http_settings.max_retries
        self._backoff_initial_seconds = http_settings.backoff_initial_seconds
        self._backoff_multiplier = http_settings.backoff_multiplier
        self._min_request_interval_seconds = (
            1.0 / http_settings.rate_limit_per_second if http_settings.rate_limit_per_second > 0 else 0.0
        )
        self._last_request_monotonic: float = 0.0
        self._rate_limit_lock = threading.Lock()

    def _request_json(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """
        Execute an HTTP request and return parsed JSON.
        """

        response = self._request(method=method, url=url, params=params)
        try:
            return response.json()
        except ValueError as exc:
            raise ConnectorRequestError(f"{self.name}: response was not valid JSON.") from exc

    def _request(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> requests.Response:
        """
        Execute an HTTP request with rate limiting and exponential backoff.
        """

        if self._session is None:
            raise ConnectorRequestError(f"{self.name}: no HTTP session configured.")

        last_error: Exception | None = None
        last_status: int | None = None
        for attempt in range(self._max_retries + 1):
            self._apply_rate_limit()
            try:
                response = self._session.request(
                    method=method,
                    url=url,
                    params=params,
                    timeout=self._timeout_seconds,
                )
                if response.status_code in RETRYABLE_STATUS_CODES:
                    raise requests.HTTPError(
                        f"Retryable HTTP status code: {response.status_code}",
                        response=response,
                    )
                response.raise_for_status()
                return response
            except requests.HTTPError as exc:
                last_error = exc
                last_status = exc.response.status_code if exc.response is not None else None
                if last_status not in RETRYABLE_STATUS_CODES:
                    logger.error(
                        "Connector request failed connector=%s status=%s url=%s error=%s",
                        self.name,
                        last_status,
                        url,
                        exc,
                    )
                    raise ConnectorRequestError(
                        f"{self.name}: request failed with HTTP {last_status}.",
                        status_code=last_status,
                    ) from exc
            except (requests.Timeout, requests.ConnectionError) as exc:
                last_error = exc
                last_status = None

            if attempt >= self._max_retries:
                break

            backoff_seconds = self._backoff_initial_seconds * (self._backoff_multiplier**attempt)
            logger.warning(
                "Connector request retry connector=%s attempt=%s/%s wait_seconds=%.2f url=%s",
                self.name,
                attempt + 1,
                self._max_retries,
                backoff_seconds,
                url,
            )
            time.sleep(backoff_seconds)

        logger.error(
            "Connector request failed connector=%s url=%s error=%s",
            self.name,
            url,
            last_error,
        )
        raise ConnectorRequestError(
            f"{self.name}: request failed: {last_error}",
            status_code=last_status,
        ) from last_error

    def _apply_rate_limit(self) -> None:
        """
        Enforce minimum interval between outbound requests.
        """

        if self._min_request_interval_seconds <= 0:
            return

        # Sync units share one connector from worker threads.
        with self._rate_limit_lock:
            now = time.monotonic()
            elapsed = now - self._last_request_monotonic
            remaining = self._min_request_interval_seconds - elapsed
            if remaining > 0:
                time.sleep(remaining)
            self._last_request_monotonic = time.monotonic()
