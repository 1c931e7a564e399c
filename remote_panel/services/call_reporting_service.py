"""
remote_panel/services/call_reporting_service.py

Date-range queries and summaries over cached call records.

Every query first makes sure the cache is fresh: when no source has synced
yet, or both the newest sync and the last refresh attempt are older than the
stale window, a full sync cycle runs before the query. Concurrent queries
share one refresh. A failed refresh is logged and the query is answered from
whatever is cached.

Goal attainment compares calls against a daily call goal per executive
working day (one executive on one call date).
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter, defaultdict
from collections.abc import Callable
from datetime import date, datetime, timedelta, timezone
from functools import lru_cache

from remote_panel.config import get_sync_settings
from remote_panel.domain.call_record import CallRecord, CallStatus
from remote_panel.domain.reporting import (
    DailyCalls,
    DataConsistencyReport,
    ExecutiveCallsDetail,
    PerformanceLevel,
    SponsorCallsDetail,
    SponsorCallsSummary,
)
from remote_panel.services.sheet_sync_service import SheetSyncService, get_sheet_sync_service

logger = logging.getLogger(__name__)

DEFAULT_DAILY_CALL_GOAL = 60

# Lower bounds of goal attainment ratio, highest band first.
PERFORMANCE_THRESHOLDS: tuple[tuple[float, PerformanceLevel], ...] = (
    (1.0, PerformanceLevel.EXCELLENT),
    (0.8, PerformanceLevel.GOOD),
    (0.6, PerformanceLevel.AVERAGE),
    (0.3, PerformanceLevel.POOR),
)


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def _normalize_name(value: str) -> str:
    return " ".join(value.split()).casefold()


def _validate_range(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise ValueError(
            f"start date {start_date.isoformat()} is after end date {end_date.isoformat()}"
        )


def _calls_by_date(records: list[CallRecord]) -> dict[date, int]:
    totals: dict[date, int] = defaultdict(int)
    for record in records:
        totals[record.call_date] += record.total_calls
    return dict(sorted(totals.items()))


def _average_per_active_day(calls_by_date: dict[date, int]) -> float:
    if not calls_by_date:
        return 0.0
    return round(sum(calls_by_date.values()) / len(calls_by_date), 2)


def _working_days(records: list[CallRecord]) -> int:
    return len({(record.executive_name, record.call_date) for record in records})


def goal_percentage(total_calls: int, total_goal: int) -> float:
    if total_goal <= 0:
        return 0.0
    return round(total_calls / total_goal * 100, 2)


def determine_performance_level(total_calls: int, total_goal: int) -> PerformanceLevel:
    """
    Band goal attainment; without a goal the level is UNKNOWN.
    """

    if total_goal <= 0:
        return PerformanceLevel.UNKNOWN
    ratio = total_calls / total_goal
    for lower_bound, level in PERFORMANCE_THRESHOLDS:
        if ratio >= lower_bound:
            return level
    return PerformanceLevel.CRITICAL


class CallReportingService:
    """
    Reporting queries backed by the sheet sync cache.
    """

    def __init__(
        self,
        *,
        sync_service: SheetSyncService,
        stale_after: timedelta = timedelta(minutes=30),
        daily_call_goal: int = DEFAULT_DAILY_CALL_GOAL,
        clock: Callable[[], datetime] = _utc_now,
        today_provider: Callable[[], date] = date.today,
    ) -> None:
        self._sync_service = sync_service
        self._stale_after = stale_after
        self._daily_call_goal = max(0, daily_call_goal)
        self._clock = clock
        self._today_provider = today_provider
        self._refresh_lock = asyncio.Lock()
        self._last_refresh_attempt: datetime | None = None

    @property
    def daily_call_goal(self) -> int:
        return self._daily_call_goal

    def _is_stale(self) -> bool:
        reference_times = [
            moment
            for moment in (self._sync_service.last_successful_sync, self._last_refresh_attempt)
            if moment is not None
        ]
        if not reference_times:
            return True
        return self._clock() - max(reference_times) > self._stale_after

    async def ensure_fresh(self) -> bool:
        """
        Run a sync cycle when the cache is stale. Returns True if one ran.
        """

        if not self._is_stale():
            return False

        async with self._refresh_lock:
            # An attempt that finished while waiting counts, even a failed one.
            if not self._is_stale():
                return False
            logger.info("Call cache is stale; refreshing from Google Sheets")
            try:
                summary = await self._sync_service.sync_all()
            except Exception as exc:
                logger.warning("Cache refresh failed; serving cached data error=%s", exc)
                return False
            finally:
                self._last_refresh_attempt = self._clock()
            if not summary.success:
                logger.warning(
                    "Cache refresh finished with errors sheets_with_errors=%s",
                    summary.sheets_with_errors,
                )
            return True

    async def get_call_records(self, start_date: date, end_date: date) -> list[CallRecord]:
        """
        Return cached records with a call date in [start_date, end_date], oldest first.
        """

        _validate_range(start_date, end_date)
        await self.ensure_fresh()
        records = [
            record
            for record in self._sync_service.get_cached_records()
            if start_date <= record.call_date <= end_date
        ]
        records.sort(key=lambda record: record.call_date)
        logger.debug(
            "Call records in range start=%s end=%s count=%s",
            start_date.isoformat(),
            end_date.isoformat(),
            len(records),
        )
        return records

    async def get_calls_summary_by_sponsor(
        self,
        start_date: date,
        end_date: date,
    ) -> list[SponsorCallsSummary]:
        records = await self.get_call_records(start_date, end_date)

        grouped: dict[str, list[CallRecord]] = defaultdict(list)
        for record in records:
            grouped[record.sponsor_name].append(record)

        summaries: list[SponsorCallsSummary] = []
        for sponsor_name, sponsor_records in grouped.items():
            calls_by_date = _calls_by_date(sponsor_records)
            total_calls = sum(calls_by_date.values())
            total_goal = self._daily_call_goal * _working_days(sponsor_records)
            summaries.append(
                SponsorCallsSummary(
                    sponsor_name=sponsor_name,
                    total_calls=total_calls,
                    executive_count=len({record.executive_name for record in sponsor_records}),
                    average_per_day=_average_per_active_day(calls_by_date),
                    total_goal=total_goal,
                    goal_percentage=goal_percentage(total_calls, total_goal),
                    daily_calls=[
                        DailyCalls(call_date=call_date, call_count=count)
                        for call_date, count in calls_by_date.items()
                    ],
                )
            )

        summaries.sort(key=lambda summary: (-summary.total_calls, summary.sponsor_name))
        return summaries

    async def get_calls_detail_by_sponsor(
        self,
        sponsor_name: str,
        start_date: date,
        end_date: date,
    ) -> SponsorCallsDetail:
        """
        Drill-down of one sponsor into per-executive call totals.

        Sponsor names match case-insensitively. A sponsor with no records in
        range yields an empty detail rather than an error.
        """

        records = await self.get_call_records(start_date, end_date)
        wanted = _normalize_name(sponsor_name)
        sponsor_records = [
            record for record in records if _normalize_name(record.sponsor_name) == wanted
        ]
        if not sponsor_records:
            return SponsorCallsDetail(
                sponsor_name=sponsor_name,
                start_date=start_date,
                end_date=end_date,
            )

        by_executive: dict[str, list[CallRecord]] = defaultdict(list)
        for record in sponsor_records:
            by_executive[record.executive_name].append(record)

        executive_details: list[ExecutiveCallsDetail] = []
        for executive_name, executive_records in by_executive.items():
            calls_by_date = _calls_by_date(executive_records)
            best_day = max(calls_by_date, key=lambda day: (calls_by_date[day], day))
            status_counts: Counter[CallStatus] = Counter()
            for record in executive_records:
                status_counts[record.status] += record.total_calls
            total_calls = sum(calls_by_date.values())
            total_goal = self._daily_call_goal * len(calls_by_date)
            executive_details.append(
                ExecutiveCallsDetail(
                    executive_name=executive_name,
                    total_calls=total_calls,
                    average_calls_per_day=_average_per_active_day(calls_by_date),
                    best_day=best_day,
                    daily_goal=self._daily_call_goal,
                    total_goal=total_goal,
                    goal_achievement_percentage=goal_percentage(total_calls, total_goal),
                    performance_level=determine_performance_level(total_calls, total_goal),
                    calls_by_date=calls_by_date,
                    status_breakdown=dict(status_counts),
                )
            )
        executive_details.sort(key=lambda detail: (-detail.total_calls, detail.executive_name))

        calls_by_date = _calls_by_date(sponsor_records)
        total_calls = sum(calls_by_date.values())
        total_goal = sum(detail.total_goal for detail in executive_details)
        return SponsorCallsDetail(
            sponsor_name=sponsor_records[0].sponsor_name,
            start_date=start_date,
            end_date=end_date,
            total_calls=total_calls,
            executive_count=len(by_executive),
            total_goal=total_goal,
            goal_achievement_percentage=goal_percentage(total_calls, total_goal),
            calls_by_date=calls_by_date,
            executive_details=executive_details,
        )

    async def get_call_records_by_executive(
        self,
        executive_name: str,
        start_date: date,
        end_date: date,
    ) -> list[CallRecord]:
        records = await self.get_call_records(start_date, end_date)
        wanted = _normalize_name(executive_name)
        return [record for record in records if _normalize_name(record.executive_name) == wanted]

    def validate_consistency(self) -> DataConsistencyReport:
        """
        Sanity-check every cached record without triggering a sync.
        """

        records = self._sync_service.get_cached_records()
        registered = set(self._sync_service.registry.names())
        today = self._today_provider()
        errors: list[str] = []
        warnings: list[str] = []

        negative = sum(1 for record in records if record.total_calls < 0)
        if negative:
            errors.append(f"Found {negative} records with negative calls")

        unregistered = sorted({record.source_name for record in records} - registered)
        if unregistered:
            errors.append(f"Found records from unregistered sources: {', '.join(unregistered)}")

        future = sum(1 for record in records if record.call_date > today)
        if future:
            warnings.append(f"Found {future} records with future dates")

        unknown_status = sum(1 for record in records if record.status == CallStatus.UNKNOWN)
        if unknown_status:
            warnings.append(f"Found {unknown_status} records with an unknown status")

        if errors:
            logger.warning("Call record consistency check failed errors=%s", len(errors))

        return DataConsistencyReport(
            is_valid=not errors,
            total_records_validated=len(records),
            validated_at=self._clock(),
            errors=errors,
            warnings=warnings,
        )


@lru_cache(maxsize=1)
def get_call_reporting_service() -> CallReportingService:
    """
    Build and cache the call reporting service.
    """

    settings = get_sync_settings()
    return CallReportingService(
        sync_service=get_sheet_sync_service(),
        stale_after=timedelta(minutes=settings.stale_after_minutes),
        daily_call_goal=settings.daily_call_goal,
    )
