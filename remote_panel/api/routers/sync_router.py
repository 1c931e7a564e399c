"""
remote_panel/api/routers/sync_router.py

Sheet sync trigger and status endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from remote_panel.schemas.sync import (
    ConnectionStatusResponse,
    SourceStatusResponse,
    SyncStatisticsResponse,
    SyncSummaryResponse,
)
from remote_panel.services.sheet_sync_service import SheetSyncService, get_sheet_sync_service

router = APIRouter(prefix="/sync", tags=["sync"])


@router.post("", response_model=SyncSummaryResponse)
async def sync_all_sources(
    sync_service: SheetSyncService = Depends(get_sheet_sync_service),
) -> SyncSummaryResponse:
    """
    Run one sync cycle over every registered sheet source.

    Per-source failures are reported inside the payload; the request itself
    still returns HTTP 200.
    """

    summary = await sync_service.sync_all()
    return SyncSummaryResponse.model_validate(summary)


@router.post("/sponsors/{sponsor}", response_model=SyncSummaryResponse)
async def sync_sponsor_sources(
    sponsor: str,
    sync_service: SheetSyncService = Depends(get_sheet_sync_service),
) -> SyncSummaryResponse:
    try:
        summary = await sync_service.sync_sponsor(sponsor)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No sheet sources registered for sponsor: {sponsor}",
        ) from exc
    return SyncSummaryResponse.model_validate(summary)


@router.get("/status", response_model=list[SourceStatusResponse])
def get_source_statuses(
    sync_service: SheetSyncService = Depends(get_sheet_sync_service),
) -> list[SourceStatusResponse]:
    return [
        SourceStatusResponse.model_validate(source_status)
        for source_status in sync_service.get_source_statuses()
    ]


@router.get("/statistics", response_model=SyncStatisticsResponse)
def get_sync_statistics(
    sync_service: SheetSyncService = Depends(get_sheet_sync_service),
) -> SyncStatisticsResponse:
    return SyncStatisticsResponse.model_validate(sync_service.get_sync_statistics())


@router.get("/connection", response_model=ConnectionStatusResponse)
async def check_connection(
    sync_service: SheetSyncService = Depends(get_sheet_sync_service),
) -> ConnectionStatusResponse:
    """
    Probe Google Sheets connectivity with a metadata read.
    """

    return ConnectionStatusResponse.model_validate(await sync_service.check_connection())
