"""
remote_panel/domain/sync.py

Domain models for sheet sync state and sync cycle results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from remote_panel.domain.call_record import CallRecord


class SyncErrorKind(str, Enum):
    """
    Where a sync problem happened and how far it reaches.
    """

    CONNECTION_ERROR = "connection_error"
    MISSING_DATA = "missing_data"
    ROW_PARSE_ERROR = "row_parse_error"
    VALIDATION_ERROR = "validation_error"


class SourceSyncPhase(str, Enum):
    """
    Per-source sync state machine: idle -> fetching -> success | failed.
    """

    IDLE = "idle"
    FETCHING = "fetching"
    SUCCESS = "success"
    FAILED = "failed"


SYSTEM_SOURCE_NAME = "System"


@dataclass(frozen=True)
class SyncError:
    """
    Structured error entry for one source (or the synthetic system source).
    """

    source_name: str
    error_kind: SyncErrorKind
    message: str


@dataclass(frozen=True)
class ColumnValidationReport:
    """
    Result of checking a header row for the required canonical columns.
    """

    source_name: str
    is_valid: bool
    missing_columns: tuple[str, ...] = ()
    headers: tuple[str, ...] = ()


@dataclass(frozen=True)
class SourceSyncState:
    """
    Cached sync state of one source. Replaced as a whole on every write.
    """

    source_name: str
    phase: SourceSyncPhase = SourceSyncPhase.IDLE
    last_sync_time: datetime | None = None
    last_attempt_time: datetime | None = None
    cached_records: tuple[CallRecord, ...] = ()
    consecutive_failures: int = 0
    last_error: str | None = None
    last_error_kind: SyncErrorKind | None = None
    missing_columns: tuple[str, ...] = ()


@dataclass(frozen=True)
class SourceSyncOutcome:
    """
    Tagged result of one source sync unit.
    """

    source_name: str
    succeeded: bool
    records_cached: int = 0
    rows_with_errors: int = 0
    error: SyncError | None = None
    validation: ColumnValidationReport | None = None

    @classmethod
    def success(
        cls,
        *,
        source_name: str,
        records_cached: int,
        rows_with_errors: int,
        validation: ColumnValidationReport,
    ) -> SourceSyncOutcome:
        return cls(
            source_name=source_name,
            succeeded=True,
            records_cached=records_cached,
            rows_with_errors=rows_with_errors,
            validation=validation,
        )

    @classmethod
    def failure(cls, error: SyncError) -> SourceSyncOutcome:
        return cls(source_name=error.source_name, succeeded=False, error=error)


@dataclass(frozen=True)
class SyncSummary:
    """
    Aggregate result of one sync cycle.
    """

    success: bool
    sheets_processed: int
    sheets_with_errors: int
    call_records_updated: int
    sync_started_at: datetime
    duration_seconds: float = 0.0
    rows_with_errors: int = 0
    errors: list[SyncError] = field(default_factory=list)
    validation_reports: list[ColumnValidationReport] = field(default_factory=list)


@dataclass(frozen=True)
class SyncStatistics:
    """
    Read-only snapshot of sync health across all sources.
    """

    last_successful_sync: datetime | None
    total_sources: int
    successful_sources: int
    failed_sources: int
    records_synced_today: int


@dataclass(frozen=True)
class SourceStatus:
    """
    Per-source status line for dashboards.
    """

    source_name: str
    sponsor_name: str
    label: str
    status: SourceSyncPhase
    last_sync_time: datetime | None
    consecutive_failures: int
    last_error: str | None = None
    record_count: int = 0


@dataclass(frozen=True)
class ConnectionStatus:
    """
    Result of a lightweight connectivity probe.
    """

    is_connected: bool
    message: str
    elapsed_seconds: float
    checked_at: datetime


@dataclass(frozen=True)
class SourceConfigValidation:
    """
    Result of validating one source configuration against the remote service.
    """

    source_name: str
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    document_title: str | None = None
