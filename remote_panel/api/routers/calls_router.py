"""
remote_panel/api/routers/calls_router.py

Call reporting endpoints over the synced sheet cache.

Date ranges are inclusive. When omitted, ``end`` defaults to today and
``start`` to 30 days before ``end``.
"""

from __future__ import annotations

from datetime import date, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query, status

from remote_panel.schemas.calls import (
    CallRecordResponse,
    DataConsistencyResponse,
    SponsorCallsDetailResponse,
    SponsorCallsSummaryResponse,
)
from remote_panel.services.call_reporting_service import (
    CallReportingService,
    get_call_reporting_service,
)

router = APIRouter(prefix="/calls", tags=["calls"])

DEFAULT_RANGE_DAYS = 30


def get_date_range(
    start: date | None = Query(default=None, description="Inclusive start date (YYYY-MM-DD)"),
    end: date | None = Query(default=None, description="Inclusive end date (YYYY-MM-DD)"),
) -> tuple[date, date]:
    """
    Resolve and validate the requested date range.
    """

    end_date = end or date.today()
    start_date = start or end_date - timedelta(days=DEFAULT_RANGE_DAYS)
    if start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start must be on or before end.",
        )
    return start_date, end_date


@router.get("", response_model=list[CallRecordResponse])
async def get_call_records(
    date_range: tuple[date, date] = Depends(get_date_range),
    reporting_service: CallReportingService = Depends(get_call_reporting_service),
) -> list[CallRecordResponse]:
    records = await reporting_service.get_call_records(*date_range)
    return [CallRecordResponse.model_validate(record) for record in records]


@router.get("/summary-by-sponsor", response_model=list[SponsorCallsSummaryResponse])
async def get_calls_summary_by_sponsor(
    date_range: tuple[date, date] = Depends(get_date_range),
    reporting_service: CallReportingService = Depends(get_call_reporting_service),
) -> list[SponsorCallsSummaryResponse]:
    summaries = await reporting_service.get_calls_summary_by_sponsor(*date_range)
    return [SponsorCallsSummaryResponse.model_validate(summary) for summary in summaries]


@router.get("/sponsors/{sponsor}", response_model=SponsorCallsDetailResponse)
async def get_calls_detail_by_sponsor(
    sponsor: str,
    date_range: tuple[date, date] = Depends(get_date_range),
    reporting_service: CallReportingService = Depends(get_call_reporting_service),
) -> SponsorCallsDetailResponse:
    detail = await reporting_service.get_calls_detail_by_sponsor(sponsor, *date_range)
    return SponsorCallsDetailResponse.model_validate(detail)


@router.get("/executives/{executive}", response_model=list[CallRecordResponse])
async def get_call_records_by_executive(
    executive: str,
    date_range: tuple[date, date] = Depends(get_date_range),
    reporting_service: CallReportingService = Depends(get_call_reporting_service),
) -> list[CallRecordResponse]:
    records = await reporting_service.get_call_records_by_executive(executive, *date_range)
    return [CallRecordResponse.model_validate(record) for record in records]


@router.get("/consistency", response_model=DataConsistencyResponse)
def validate_call_records_consistency(
    reporting_service: CallReportingService = Depends(get_call_reporting_service),
) -> DataConsistencyResponse:
    return DataConsistencyResponse.model_validate(reporting_service.validate_consistency())
