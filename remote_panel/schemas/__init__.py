"""
remote_panel/schemas package marker.
"""

from remote_panel.schemas.calls import (
    CallRecordResponse,
    DailyCallsResponse,
    DataConsistencyResponse,
    ExecutiveCallsDetailResponse,
    SponsorCallsDetailResponse,
    SponsorCallsSummaryResponse,
)
from remote_panel.schemas.sync import (
    ColumnValidationResponse,
    ConnectionStatusResponse,
    HealthResponse,
    SourceStatusResponse,
    SyncErrorResponse,
    SyncStatisticsResponse,
    SyncSummaryResponse,
)

__all__ = [
    "CallRecordResponse",
    "ColumnValidationResponse",
    "ConnectionStatusResponse",
    "DailyCallsResponse",
    "DataConsistencyResponse",
    "ExecutiveCallsDetailResponse",
    "HealthResponse",
    "SourceStatusResponse",
    "SponsorCallsDetailResponse",
    "SponsorCallsSummaryResponse",
    "SyncErrorResponse",
    "SyncStatisticsResponse",
    "SyncSummaryResponse",
]
