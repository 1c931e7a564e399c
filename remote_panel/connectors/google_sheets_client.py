"""
remote_panel/connectors/google_sheets_client.py

Read-only Google Sheets REST client over a google-auth authorized session.
"""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import quote

import requests
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account

from remote_panel.config import GoogleSheetsSettings, SheetsHTTPSettings
from remote_panel.connectors.base import BaseHTTPConnector, ConnectorRequestError
from remote_panel.domain.sheet_source import SheetDocumentDescriptor

logger = logging.getLogger(__name__)


class SheetsClientUnavailableError(ConnectorRequestError):
    """
    Raised on every call when the client was never initialized with credentials.
    """


def build_credentials(settings: GoogleSheetsSettings) -> service_account.Credentials | None:
    """
    Resolve service-account credentials once; None when missing or invalid.
    """

    scopes = list(settings.scopes)
    try:
        if settings.credentials_json:
            info = json.loads(settings.credentials_json)
            return service_account.Credentials.from_service_account_info(info, scopes=scopes)
        if settings.credentials_path:
            return service_account.Credentials.from_service_account_file(
                settings.credentials_path,
                scopes=scopes,
            )
    except (OSError, ValueError, GoogleAuthError) as exc:
        logger.error("Google Sheets: failed to load service account credentials: %s", exc)
        return None

    logger.error(
        "Google Sheets: credentials not configured. Set GOOGLE_SHEETS_CREDENTIALS_PATH "
        "or GOOGLE_SHEETS_CREDENTIALS_JSON."
    )
    return None


class GoogleSheetsClient(BaseHTTPConnector):
    """
    Remote tabular-data reader: cell ranges and document metadata.
    """

    def __init__(
        self,
        *,
        settings: GoogleSheetsSettings,
        http_settings: SheetsHTTPSettings,
        session: requests.Session | None,
    ) -> None:
        super().__init__(name="google_sheets", http_settings=http_settings, session=session)
        self._base_url = settings.base_url.rstrip("/")

    @classmethod
    def from_settings(
        cls,
        *,
        settings: GoogleSheetsSettings,
        http_settings: SheetsHTTPSettings,
    ) -> GoogleSheetsClient:
        """
        Build a client; without valid credentials it stays permanently disabled.
        """

        credentials = build_credentials(settings)
        session: requests.Session | None = None
        if credentials is not None:
            session = AuthorizedSession(credentials)
            session.headers.update({"User-Agent": settings.application_name})
            logger.info("Google Sheets client initialized application=%s", settings.application_name)
        return cls(settings=settings, http_settings=http_settings, session=session)

    @property
    def enabled(self) -> bool:
        return self._session is not None

    def get_range(self, document_id: str, range_spec: str) -> list[list[Any]]:
        """
        Read a contiguous cell range as rows of formatted values.
        """

        self._ensure_enabled()
        url = f"{self._base_url}/{quote(document_id, safe='')}/values/{quote(range_spec, safe='')}"
        payload = self._request_json(
            method="GET",
            url=url,
            params={"majorDimension": "ROWS", "valueRenderOption": "FORMATTED_VALUE"},
        )
        values = payload.get("values", []) if isinstance(payload, dict) else []
        return [list(row) for row in values if isinstance(row, list)]

    def get_metadata(self, document_id: str) -> SheetDocumentDescriptor:
        """
        Read the spreadsheet title without touching cell data.
        """

        self._ensure_enabled()
        payload = self._request_json(
            method="GET",
            url=f"{self._base_url}/{quote(document_id, safe='')}",
            params={"fields": "spreadsheetId,properties.title"},
        )
        if not isinstance(payload, dict):
            payload = {}
        properties = payload.get("properties")
        title = properties.get("title") if isinstance(properties, dict) else None
        return SheetDocumentDescriptor(
            document_id=str(payload.get("spreadsheetId") or document_id),
            title=str(title or ""),
        )

    def _ensure_enabled(self) -> None:
        if self._session is None:
            raise SheetsClientUnavailableError("Google Sheets client is not initialized.")
