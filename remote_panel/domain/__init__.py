"""
remote_panel/domain package marker.
"""

from remote_panel.domain.call_record import (
    CANONICAL_FIELDS,
    CallRecord,
    CallStatus,
    ColumnMap,
    RowParseError,
)
from remote_panel.domain.reporting import (
    DailyCalls,
    DataConsistencyReport,
    ExecutiveCallsDetail,
    PerformanceLevel,
    SponsorCallsDetail,
    SponsorCallsSummary,
)
from remote_panel.domain.sheet_source import RawSheetBlock, SheetDocumentDescriptor, SourceConfig
from remote_panel.domain.sync import (
    ColumnValidationReport,
    ConnectionStatus,
    SourceConfigValidation,
    SourceStatus,
    SourceSyncOutcome,
    SourceSyncPhase,
    SourceSyncState,
    SyncError,
    SyncErrorKind,
    SyncStatistics,
    SyncSummary,
)

__all__ = [
    "CANONICAL_FIELDS",
    "CallRecord",
    "CallStatus",
    "ColumnMap",
    "ColumnValidationReport",
    "ConnectionStatus",
    "DailyCalls",
    "DataConsistencyReport",
    "ExecutiveCallsDetail",
    "PerformanceLevel",
    "RawSheetBlock",
    "RowParseError",
    "SheetDocumentDescriptor",
    "SourceConfig",
    "SourceConfigValidation",
    "SourceStatus",
    "SourceSyncOutcome",
    "SourceSyncPhase",
    "SourceSyncState",
    "SponsorCallsDetail",
    "SponsorCallsSummary",
    "SyncError",
    "SyncErrorKind",
    "SyncStatistics",
    "SyncSummary",
]
