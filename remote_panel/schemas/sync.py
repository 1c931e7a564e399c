"""
remote_panel/schemas/sync.py

Response schemas for sheet sync operations.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from remote_panel.domain.sync import SourceSyncPhase, SyncErrorKind


class SyncErrorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    source_name: str
    error_kind: SyncErrorKind
    message: str


class ColumnValidationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    source_name: str
    is_valid: bool
    missing_columns: list[str] = Field(default_factory=list)
    headers: list[str] = Field(default_factory=list)


class SyncSummaryResponse(BaseModel):
    """
    API response model for one sync cycle.
    """

    model_config = ConfigDict(from_attributes=True)

    success: bool
    sheets_processed: int = Field(..., ge=0)
    sheets_with_errors: int = Field(..., ge=0)
    call_records_updated: int = Field(..., ge=0)
    rows_with_errors: int = Field(default=0, ge=0)
    sync_started_at: datetime
    duration_seconds: float = Field(default=0.0, ge=0)
    errors: list[SyncErrorResponse] = Field(default_factory=list)
    validation_reports: list[ColumnValidationResponse] = Field(default_factory=list)


class SourceStatusResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    source_name: str
    sponsor_name: str
    label: str
    status: SourceSyncPhase
    last_sync_time: datetime | None = None
    consecutive_failures: int = Field(..., ge=0)
    last_error: str | None = None
    record_count: int = Field(default=0, ge=0)


class SyncStatisticsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    last_successful_sync: datetime | None = None
    total_sources: int = Field(..., ge=0)
    successful_sources: int = Field(..., ge=0)
    failed_sources: int = Field(..., ge=0)
    records_synced_today: int = Field(..., ge=0)


class ConnectionStatusResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    is_connected: bool
    message: str
    elapsed_seconds: float = Field(..., ge=0)
    checked_at: datetime


class HealthResponse(BaseModel):
    status: str
    registered_sources: int = Field(..., ge=0)
    scheduler_enabled: bool
