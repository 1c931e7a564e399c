"""
remote_panel/schemas/calls.py

Response schemas for call reporting endpoints.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from remote_panel.domain.call_record import CallStatus
from remote_panel.domain.reporting import PerformanceLevel


class CallRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    call_date: date
    executive_name: str
    sponsor_name: str
    source_name: str
    total_calls: int
    status: CallStatus
    notes: str
    last_updated: datetime


class DailyCallsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    call_date: date
    call_count: int = Field(..., ge=0)


class SponsorCallsSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sponsor_name: str
    total_calls: int
    executive_count: int = Field(..., ge=0)
    average_per_day: float
    total_goal: int = Field(default=0, ge=0)
    goal_percentage: float = 0.0
    daily_calls: list[DailyCallsResponse] = Field(default_factory=list)


class ExecutiveCallsDetailResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    executive_name: str
    total_calls: int
    average_calls_per_day: float
    best_day: date | None = None
    daily_goal: int = Field(default=0, ge=0)
    total_goal: int = Field(default=0, ge=0)
    goal_achievement_percentage: float = 0.0
    performance_level: PerformanceLevel = PerformanceLevel.UNKNOWN
    calls_by_date: dict[date, int] = Field(default_factory=dict)
    status_breakdown: dict[CallStatus, int] = Field(default_factory=dict)


class SponsorCallsDetailResponse(BaseModel):
    """
    API response model for a sponsor drill-down.
    """

    model_config = ConfigDict(from_attributes=True)

    sponsor_name: str
    start_date: date
    end_date: date
    total_calls: int = 0
    executive_count: int = Field(default=0, ge=0)
    total_goal: int = Field(default=0, ge=0)
    goal_achievement_percentage: float = 0.0
    calls_by_date: dict[date, int] = Field(default_factory=dict)
    executive_details: list[ExecutiveCallsDetailResponse] = Field(default_factory=list)


class DataConsistencyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    is_valid: bool
    total_records_validated: int = Field(..., ge=0)
    validated_at: datetime
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
