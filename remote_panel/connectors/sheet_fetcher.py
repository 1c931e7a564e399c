"""
remote_panel/connectors/sheet_fetcher.py

Per-source retrieval of raw cell blocks and the connectivity probe.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Protocol

import requests
from google.auth.exceptions import GoogleAuthError

from remote_panel.connectors.base import ConnectorRequestError
from remote_panel.domain.sheet_source import RawSheetBlock, SheetDocumentDescriptor, SourceConfig
from remote_panel.domain.sync import ConnectionStatus, SyncErrorKind

logger = logging.getLogger(__name__)

DEFAULT_RANGE_SPEC = "A:T"


class FetchError(RuntimeError):
    """
    Source-level fetch failure, tagged with its error kind.
    """

    def __init__(self, message: str, *, kind: SyncErrorKind) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind


class SheetDataReader(Protocol):
    @property
    def enabled(self) -> bool:
        ...

    def get_range(self, document_id: str, range_spec: str) -> list[list[Any]]:
        ...

    def get_metadata(self, document_id: str) -> SheetDocumentDescriptor:
        ...


class SheetFetcher:
    """
    Reads one contiguous cell range per source and checks its shape.
    """

    def __init__(self, *, client: SheetDataReader, range_spec: str = DEFAULT_RANGE_SPEC) -> None:
        self._client = client
        self._range_spec = range_spec

    @property
    def enabled(self) -> bool:
        return self._client.enabled

    @property
    def range_spec(self) -> str:
        return self._range_spec

    def build_range(self, config: SourceConfig, range_spec: str | None = None) -> str:
        """
        Return the A1 range for a source, scoped to its tab when one is configured.
        """

        cells = range_spec or self._range_spec
        if config.tab_name:
            escaped = config.tab_name.replace("'", "''")
            return f"'{escaped}'!{cells}"
        return cells

    def fetch(self, document_id: str, range_spec: str | None = None) -> RawSheetBlock:
        """
        Fetch a raw block; raise FetchError for connection or missing-data failures.
        """

        if not self._client.enabled:
            raise FetchError(
                "Google Sheets client is not initialized.",
                kind=SyncErrorKind.CONNECTION_ERROR,
            )

        effective_range = range_spec or self._range_spec
        try:
            values = self._client.get_range(document_id, effective_range)
        except (ConnectorRequestError, requests.RequestException, GoogleAuthError) as exc:
            raise FetchError(
                f"Failed to read range {effective_range!r}: {exc}",
                kind=SyncErrorKind.CONNECTION_ERROR,
            ) from exc

        if not values:
            raise FetchError("No data found in sheet.", kind=SyncErrorKind.MISSING_DATA)

        block = RawSheetBlock.from_values(values)
        if not any(header.strip() for header in block.headers):
            raise FetchError("Sheet header row is empty.", kind=SyncErrorKind.MISSING_DATA)
        if not block.rows:
            raise FetchError("Sheet has no data rows.", kind=SyncErrorKind.MISSING_DATA)

        logger.debug(
            "Fetched sheet block document_id=%s range=%s rows=%s columns=%s",
            document_id,
            effective_range,
            len(block.rows),
            block.width,
        )
        return block

    def check_connection(self, document_id: str) -> ConnectionStatus:
        """
        Issue a metadata read against one document and report the outcome.
        """

        started = time.monotonic()
        if not self._client.enabled:
            return ConnectionStatus(
                is_connected=False,
                message="Google Sheets client is not initialized.",
                elapsed_seconds=time.monotonic() - started,
                checked_at=datetime.now(tz=timezone.utc),
            )

        try:
            descriptor = self._client.get_metadata(document_id)
        except Exception as exc:
            logger.exception("Google Sheets connection test failed document_id=%s", document_id)
            return ConnectionStatus(
                is_connected=False,
                message=f"Connection error: {exc}",
                elapsed_seconds=time.monotonic() - started,
                checked_at=datetime.now(tz=timezone.utc),
            )

        return ConnectionStatus(
            is_connected=True,
            message=f"Connection successful. Test sheet: {descriptor.title}",
            elapsed_seconds=time.monotonic() - started,
            checked_at=datetime.now(tz=timezone.utc),
        )

    def get_metadata(self, document_id: str) -> SheetDocumentDescriptor:
        return self._client.get_metadata(document_id)
