"""
remote_panel/connectors package marker.
"""

from remote_panel.connectors.base import BaseHTTPConnector, ConnectorRequestError
from remote_panel.connectors.google_sheets_client import (
    GoogleSheetsClient,
    SheetsClientUnavailableError,
    build_credentials,
)
from remote_panel.connectors.sheet_fetcher import (
    DEFAULT_RANGE_SPEC,
    FetchError,
    SheetDataReader,
    SheetFetcher,
)

__all__ = [
    "BaseHTTPConnector",
    "ConnectorRequestError",
    "DEFAULT_RANGE_SPEC",
    "FetchError",
    "GoogleSheetsClient",
    "SheetDataReader",
    "SheetFetcher",
    "SheetsClientUnavailableError",
    "build_credentials",
]
