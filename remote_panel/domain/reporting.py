"""
remote_panel/domain/reporting.py

Read models built from cached call records for the dashboard.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from remote_panel.domain.call_record import CallStatus


class PerformanceLevel(str, Enum):
    """
    Goal attainment band of an executive over a date range.
    """

    UNKNOWN = "unknown"
    CRITICAL = "critical"
    POOR = "poor"
    AVERAGE = "average"
    GOOD = "good"
    EXCELLENT = "excellent"


@dataclass(frozen=True)
class DailyCalls:
    call_date: date
    call_count: int


@dataclass(frozen=True)
class SponsorCallsSummary:
    """
    Call totals of one sponsor over a date range.

    total_goal is the daily call goal times the number of executive working
    days (distinct executive and date pairs) in range.
    """

    sponsor_name: str
    total_calls: int
    executive_count: int
    average_per_day: float
    total_goal: int = 0
    goal_percentage: float = 0.0
    daily_calls: list[DailyCalls] = field(default_factory=list)


@dataclass(frozen=True)
class ExecutiveCallsDetail:
    """
    Call totals of one executive within a sponsor drill-down.
    """

    executive_name: str
    total_calls: int
    average_calls_per_day: float
    best_day: date | None
    daily_goal: int = 0
    total_goal: int = 0
    goal_achievement_percentage: float = 0.0
    performance_level: PerformanceLevel = PerformanceLevel.UNKNOWN
    calls_by_date: dict[date, int] = field(default_factory=dict)
    status_breakdown: dict[CallStatus, int] = field(default_factory=dict)


@dataclass(frozen=True)
class SponsorCallsDetail:
    sponsor_name: str
    start_date: date
    end_date: date
    total_calls: int = 0
    executive_count: int = 0
    total_goal: int = 0
    goal_achievement_percentage: float = 0.0
    calls_by_date: dict[date, int] = field(default_factory=dict)
    executive_details: list[ExecutiveCallsDetail] = field(default_factory=list)


@dataclass(frozen=True)
class DataConsistencyReport:
    """
    Result of sanity checks over all cached call records.

    Errors make the report invalid; warnings do not.
    """

    is_valid: bool
    total_records_validated: int
    validated_at: datetime
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
