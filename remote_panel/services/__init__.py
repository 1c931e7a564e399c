"""
remote_panel/services package marker.
"""

from remote_panel.services.call_reporting_service import (
    CallReportingService,
    get_call_reporting_service,
)
from remote_panel.services.sheet_sync_service import SheetSyncService, get_sheet_sync_service

__all__ = [
    "CallReportingService",
    "get_call_reporting_service",
    "SheetSyncService",
    "get_sheet_sync_service",
]
