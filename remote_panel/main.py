from __future__ import annotations

import json
import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI

from remote_panel.schemas.sync import HealthResponse
from remote_panel.services.sheet_sync_service import SheetSyncService, get_sheet_sync_service


def _validate_env() -> None:
    """
    Validate startup configuration before any service is built.

    Raises RuntimeError listing every problem so the operator can fix them
    in one restart cycle. Missing Google credentials are not an error: the
    Sheets client then stays disabled and every sync reports a
    connection error.
    """

    from remote_panel.config import get_google_sheets_settings, get_sync_settings, load_env_files

    load_env_files()

    errors: list[str] = []

    # --- Sheet source registry -------------------------------------------
    sources_path = Path(get_sync_settings().sources_config_path)
    if not sources_path.is_file():
        errors.append(
            f"Sheet sources config not found at '{sources_path}'. "
            "Set SHEET_SOURCES_CONFIG_PATH to a JSON file with a 'sources' list."
        )
    else:
        try:
            json.loads(sources_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            errors.append(f"Sheet sources config '{sources_path}' is not valid JSON: {exc}")

    # --- Google credentials ----------------------------------------------
    sheets_settings = get_google_sheets_settings()
    if sheets_settings.credentials_path and not Path(sheets_settings.credentials_path).is_file():
        errors.append(
            f"GOOGLE_SHEETS_CREDENTIALS_PATH points to a missing file: "
            f"'{sheets_settings.credentials_path}'."
        )
    if not sheets_settings.credentials_path and not sheets_settings.credentials_json:
        logging.getLogger(__name__).warning(
            "No Google Sheets credentials configured; sheet syncs will fail with "
            "connection errors until GOOGLE_SHEETS_CREDENTIALS_PATH or "
            "GOOGLE_SHEETS_CREDENTIALS_JSON is set"
        )

    if errors:
        raise RuntimeError(
            "Startup validation failed: missing or invalid configuration:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Start the periodic sync scheduler on boot when enabled; shut it down on exit."""
    from remote_panel.config import get_sync_settings

    if not get_sync_settings().scheduler_enabled:
        logging.getLogger(__name__).info("Sync scheduler disabled by SYNC_SCHEDULER_ENABLED")
        yield
        return

    from remote_panel.scheduler.jobs import build_scheduler

    scheduler = build_scheduler()
    scheduler.start()
    logging.getLogger(__name__).info("Scheduler started with %d jobs", len(scheduler.get_jobs()))
    try:
        yield
    finally:
        scheduler.shutdown(wait=True)
        logging.getLogger(__name__).info("Scheduler shut down")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _configure_logging()
    _validate_env()

    application = FastAPI(
        title="Panel General Remotos API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from remote_panel.api.routers import calls_router, sync_router
    from remote_panel.config import get_sync_settings

    application.include_router(sync_router)
    application.include_router(calls_router)

    @application.get("/health", response_model=HealthResponse)
    def healthcheck(
        sync_service: SheetSyncService = Depends(get_sheet_sync_service),
    ) -> HealthResponse:
        return HealthResponse(
            status="ok",
            registered_sources=len(sync_service.registry),
            scheduler_enabled=get_sync_settings().scheduler_enabled,
        )

    return application


app = create_app()
