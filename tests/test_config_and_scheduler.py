from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timedelta, timezone

import pytest

from remote_panel import config
from remote_panel.domain.sync import SyncSummary
from remote_panel.scheduler import jobs


@pytest.fixture()
def clean_settings() -> Iterator[None]:
    for getter in (
        config.get_google_sheets_settings,
        config.get_sheets_http_settings,
        config.get_sync_settings,
    ):
        getter.cache_clear()
    yield
    for getter in (
        config.get_google_sheets_settings,
        config.get_sheets_http_settings,
        config.get_sync_settings,
    ):
        getter.cache_clear()


def test_sync_settings_defaults(monkeypatch: pytest.MonkeyPatch, clean_settings: None) -> None:
    for name in (
        "SHEET_SOURCES_CONFIG_PATH",
        "SYNC_SOURCE_TIMEOUT_SECONDS",
        "SYNC_STALE_AFTER_MINUTES",
        "SYNC_SCHEDULER_ENABLED",
        "SYNC_INTERVAL_MINUTES",
        "CALLS_DAILY_GOAL",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = config.get_sync_settings()

    assert settings.sources_config_path == str(config.DEFAULT_SOURCES_CONFIG_PATH)
    assert settings.source_timeout_seconds == 60.0
    assert settings.stale_after_minutes == 30
    assert settings.scheduler_enabled is True
    assert settings.interval_minutes == 30
    assert settings.daily_call_goal == 60


def test_malformed_numbers_fall_back_and_clamp(
    monkeypatch: pytest.MonkeyPatch,
    clean_settings: None,
) -> None:
    monkeypatch.setenv("SYNC_INTERVAL_MINUTES", "soon")
    monkeypatch.setenv("SYNC_SOURCE_TIMEOUT_SECONDS", "0")
    monkeypatch.setenv("SYNC_SCHEDULER_ENABLED", "off")
    monkeypatch.setenv("SHEETS_HTTP_MAX_RETRIES", "-4")
    monkeypatch.setenv("CALLS_DAILY_GOAL", "-5")

    settings = config.get_sync_settings()

    assert settings.interval_minutes == 30
    assert settings.source_timeout_seconds == 1.0
    assert settings.scheduler_enabled is False
    assert settings.daily_call_goal == 0
    assert config.get_sheets_http_settings().max_retries == 0


def test_sheets_settings_from_env(monkeypatch: pytest.MonkeyPatch, clean_settings: None) -> None:
    monkeypatch.setenv("GOOGLE_SHEETS_RANGE", "A:Z")
    monkeypatch.setenv("GOOGLE_SHEETS_BASE_URL", "https://sheets.example.test/v4/spreadsheets/")
    monkeypatch.setenv("GOOGLE_SHEETS_PROBE_SOURCE", "  ")

    settings = config.get_google_sheets_settings()

    assert settings.range_spec == "A:Z"
    assert settings.base_url == "https://sheets.example.test/v4/spreadsheets"
    assert settings.probe_source is None
    assert settings.scopes == (config.SHEETS_READONLY_SCOPE,)


def test_build_scheduler_registers_interval_job() -> None:
    scheduler = jobs.build_scheduler(interval_minutes=15)

    job = scheduler.get_job(jobs.SHEET_SYNC_JOB_ID)

    assert job is not None
    assert job.trigger.interval == timedelta(minutes=15)
    assert job.func is jobs.run_sheet_sync


def test_run_sheet_sync_runs_one_cycle(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []

    class FakeSyncService:
        async def sync_all(self) -> SyncSummary:
            calls.append("sync_all")
            return SyncSummary(
                success=True,
                sheets_processed=0,
                sheets_with_errors=0,
                call_records_updated=0,
                sync_started_at=datetime(2025, 8, 20, tzinfo=timezone.utc),
            )

    monkeypatch.setattr(jobs, "get_sheet_sync_service", lambda: FakeSyncService())

    jobs.run_sheet_sync()

    assert calls == ["sync_all"]


def test_run_sheet_sync_logs_unexpected_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken() -> None:
        raise RuntimeError("registry missing")

    monkeypatch.setattr(jobs, "get_sheet_sync_service", broken)

    jobs.run_sheet_sync()
