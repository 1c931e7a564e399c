"""
remote_panel/services/sheet_sync_service.py

Orchestration of concurrent sheet sync cycles and sync state queries.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import replace
from datetime import date, datetime, timezone
from functools import lru_cache

from remote_panel.config import get_google_sheets_settings, get_sheets_http_settings, get_sync_settings
from remote_panel.connectors.google_sheets_client import GoogleSheetsClient
from remote_panel.connectors.sheet_fetcher import FetchError, SheetFetcher
from remote_panel.domain.call_record import CallRecord
from remote_panel.domain.sheet_source import RawSheetBlock, SourceConfig
from remote_panel.domain.sync import (
    SYSTEM_SOURCE_NAME,
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
from remote_panel.logging_utils import log_event, sync_summary_fields
from remote_panel.mappers.column_mapper import ColumnMapper
from remote_panel.normalization.row_normalizer import RowNormalizer
from remote_panel.registry import SheetRegistry, load_source_configs
from remote_panel.repositories.source_state_repository import (
    InMemorySourceStateRepository,
    SourceStateRepository,
)
from remote_panel.validators.column_validator import ColumnValidator

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def _is_healthy(state: SourceSyncState) -> bool:
    """
    True when the last finished attempt for a source succeeded.
    """

    if state.phase == SourceSyncPhase.SUCCESS:
        return True
    return (
        state.phase == SourceSyncPhase.FETCHING
        and state.last_sync_time is not None
        and state.consecutive_failures == 0
    )


class SheetSyncService:
    """
    Fans out fetch, parse and cache across registered sources.

    One unit per source runs inside a task group, so every unit is joined
    (or cancelled) before a cycle returns. Units never raise: each one
    reports a tagged SourceSyncOutcome.
    """

    def __init__(
        self,
        *,
        registry: SheetRegistry,
        fetcher: SheetFetcher,
        store: SourceStateRepository | None = None,
        column_mapper: ColumnMapper | None = None,
        column_validator: ColumnValidator | None = None,
        normalizer: RowNormalizer | None = None,
        source_timeout_seconds: float = 60.0,
        probe_source: str | None = None,
        clock: Callable[[], datetime] = _utc_now,
        today_provider: Callable[[], date] = date.today,
    ) -> None:
        self._registry = registry
        self._fetcher = fetcher
        self._store = store if store is not None else InMemorySourceStateRepository()
        self._column_mapper = column_mapper or ColumnMapper()
        self._column_validator = column_validator or ColumnValidator()
        self._normalizer = normalizer or RowNormalizer(today_provider=today_provider, clock=clock)
        self._source_timeout_seconds = max(0.001, source_timeout_seconds)
        self._probe_source = probe_source
        self._clock = clock
        self._today_provider = today_provider

    @property
    def registry(self) -> SheetRegistry:
        return self._registry

    @property
    def last_successful_sync(self) -> datetime | None:
        sync_times = [
            state.last_sync_time
            for state in self._registered_states()
            if state.last_sync_time is not None
        ]
        return max(sync_times) if sync_times else None

    async def sync_all(self) -> SyncSummary:
        """
        Run one sync cycle over every registered source.
        """

        return await self._run_cycle(self._registry.all())

    async def sync_sources(self, source_names: Iterable[str]) -> SyncSummary:
        """
        Run one sync cycle over the named sources only.
        """

        configs = [self._registry.get(name) for name in source_names]
        return await self._run_cycle(configs)

    async def sync_sponsor(self, sponsor_name: str) -> SyncSummary:
        """
        Run one sync cycle over the sources of one sponsor.
        """

        configs = self._registry.by_sponsor(sponsor_name)
        if not configs:
            raise KeyError(f"No sheet sources registered for sponsor {sponsor_name!r}")
        return await self._run_cycle(configs)

    async def check_connection(self) -> ConnectionStatus:
        """
        Probe the designated source with a metadata read.
        """

        probe = self._probe_config()
        if probe is None:
            return ConnectionStatus(
                is_connected=False,
                message="No sheet sources registered.",
                elapsed_seconds=0.0,
                checked_at=self._clock(),
            )
        logger.info("Testing Google Sheets connection source=%s", probe.source_name)
        return await asyncio.to_thread(self._fetcher.check_connection, probe.document_id)

    async def validate_source_configuration(self, config: SourceConfig) -> SourceConfigValidation:
        """
        Check required fields and, when the client is available, remote access.
        """

        errors: list[str] = []
        if not config.source_name.strip():
            errors.append("source_name is required")
        if not config.document_id.strip():
            errors.append("document_id is required")
        if not config.sponsor_name.strip():
            errors.append("sponsor_name is required")
        if errors or not self._fetcher.enabled:
            return SourceConfigValidation(
                source_name=config.source_name,
                is_valid=not errors,
                errors=errors,
            )

        try:
            descriptor = await asyncio.to_thread(self._fetcher.get_metadata, config.document_id)
        except Exception as exc:
            logger.warning(
                "Sheet source validation failed source=%s error=%s",
                config.source_name,
                exc,
            )
            return SourceConfigValidation(
                source_name=config.source_name,
                is_valid=False,
                errors=[f"Failed to access sheet: {exc}"],
            )

        return SourceConfigValidation(
            source_name=config.source_name,
            is_valid=True,
            document_title=descriptor.title or None,
        )

    def get_source_statuses(self) -> list[SourceStatus]:
        states = self._store.all_states()
        statuses: list[SourceStatus] = []
        for config in self._registry:
            state = states.get(config.source_name) or SourceSyncState(source_name=config.source_name)
            statuses.append(
                SourceStatus(
                    source_name=config.source_name,
                    sponsor_name=config.sponsor_name,
                    label=config.label_name,
                    status=state.phase,
                    last_sync_time=state.last_sync_time,
                    consecutive_failures=state.consecutive_failures,
                    last_error=state.last_error,
                    record_count=len(state.cached_records),
                )
            )
        return statuses

    def get_sync_statistics(self) -> SyncStatistics:
        states = self._registered_states()
        today = self._today_provider()
        sync_times = [state.last_sync_time for state in states if state.last_sync_time is not None]
        successful = sum(1 for state in states if _is_healthy(state))
        return SyncStatistics(
            last_successful_sync=max(sync_times) if sync_times else None,
            total_sources=len(self._registry),
            successful_sources=successful,
            failed_sources=len(self._registry) - successful,
            records_synced_today=sum(
                1
                for state in states
                for record in state.cached_records
                if record.call_date == today
            ),
        )

    def get_cached_records(self, source_name: str | None = None) -> list[CallRecord]:
        if source_name is not None:
            self._registry.get(source_name)
            return list(self._store.get(source_name).cached_records)
        return [record for state in self._registered_states() for record in state.cached_records]

    async def _run_cycle(self, configs: Sequence[SourceConfig]) -> SyncSummary:
        started_at = self._clock()
        started = time.monotonic()
        logger.info("Starting sheet sync cycle sources=%s", len(configs))

        try:
            outcomes = await self._sync_concurrently(configs)

            errors = [outcome.error for outcome in outcomes if outcome.error is not None]
            validation_reports: list[ColumnValidationReport] = [
                outcome.validation
                for outcome in outcomes
                if outcome.validation is not None and not outcome.validation.is_valid
            ]
            # Header problems are reported but do not count the sheet as failed.
            errors.extend(
                SyncError(
                    source_name=report.source_name,
                    error_kind=SyncErrorKind.VALIDATION_ERROR,
                    message=f"Missing required columns: {', '.join(report.missing_columns)}",
                )
                for report in validation_reports
            )
            sheets_with_errors = sum(1 for outcome in outcomes if not outcome.succeeded)
            summary = SyncSummary(
                success=sheets_with_errors == 0,
                sheets_processed=len(configs),
                sheets_with_errors=sheets_with_errors,
                call_records_updated=self._store.total_record_count(),
                sync_started_at=started_at,
                duration_seconds=time.monotonic() - started,
                rows_with_errors=sum(outcome.rows_with_errors for outcome in outcomes),
                errors=errors,
                validation_reports=validation_reports,
            )
        except Exception as exc:
            logger.exception("Critical error during sheet sync cycle")
            summary = SyncSummary(
                success=False,
                sheets_processed=len(configs),
                sheets_with_errors=0,
                call_records_updated=0,
                sync_started_at=started_at,
                duration_seconds=time.monotonic() - started,
                errors=[
                    SyncError(
                        source_name=SYSTEM_SOURCE_NAME,
                        error_kind=SyncErrorKind.CONNECTION_ERROR,
                        message=f"Critical sync error: {exc}",
                    )
                ],
            )

        log_event(logger, logging.INFO, "sheet_sync_completed", **sync_summary_fields(summary))
        return summary

    async def _sync_concurrently(self, configs: Sequence[SourceConfig]) -> list[SourceSyncOutcome]:
        if not configs:
            return []
        async with asyncio.TaskGroup() as group:
            tasks = [
                group.create_task(
                    self._sync_source(config),
                    name=f"sheet-sync:{config.source_name}",
                )
                for config in configs
            ]
        return [task.result() for task in tasks]

    async def _sync_source(self, config: SourceConfig) -> SourceSyncOutcome:
        source_name = config.source_name
        previous_phase = self._store.get(source_name).phase
        self._store.mark_fetching(source_name, attempted_at=self._clock())
        logger.debug("Syncing sheet source=%s document_id=%s", source_name, config.document_id)

        try:
            block = await asyncio.wait_for(
                asyncio.to_thread(
                    self._fetcher.fetch,
                    config.document_id,
                    self._fetcher.build_range(config),
                ),
                timeout=self._source_timeout_seconds,
            )
            return self._cache_block(config, block)
        except FetchError as exc:
            return self._record_failure(source_name, exc.kind, exc.message)
        except TimeoutError:
            return self._record_failure(
                source_name,
                SyncErrorKind.CONNECTION_ERROR,
                f"Fetch timed out after {self._source_timeout_seconds:.1f}s.",
            )
        except asyncio.CancelledError:
            current = self._store.get(source_name)
            self._store.set(replace(current, phase=previous_phase))
            raise
        except Exception as exc:
            logger.exception("Unhandled failure while syncing sheet source=%s", source_name)
            return self._record_failure(
                source_name,
                SyncErrorKind.CONNECTION_ERROR,
                str(exc) or type(exc).__name__,
            )

    def _cache_block(self, config: SourceConfig, block: RawSheetBlock) -> SourceSyncOutcome:
        source_name = config.source_name
        column_map = self._column_mapper.map_columns(block.headers)
        validation = self._column_validator.validate(
            column_map=column_map,
            headers=block.headers,
            source_name=source_name,
        )
        parsed = self._normalizer.parse_rows(
            block.rows,
            column_map,
            source_name,
            sponsor_fallback=config.sponsor_name,
        )
        self._store.replace_records(
            source_name,
            parsed.records,
            synced_at=self._clock(),
            missing_columns=validation.missing_columns,
        )
        logger.info(
            "Synced sheet source=%s records=%s skipped_rows=%s error_rows=%s",
            source_name,
            len(parsed.records),
            parsed.skipped_rows,
            parsed.error_rows,
        )
        return SourceSyncOutcome.success(
            source_name=source_name,
            records_cached=len(parsed.records),
            rows_with_errors=parsed.error_rows,
            validation=validation,
        )

    def _record_failure(
        self,
        source_name: str,
        kind: SyncErrorKind,
        message: str,
    ) -> SourceSyncOutcome:
        error = SyncError(source_name=source_name, error_kind=kind, message=message)
        self._store.record_failure(error, failed_at=self._clock())
        logger.error(
            "Sheet sync failed source=%s kind=%s error=%s",
            source_name,
            kind.value,
            message,
        )
        return SourceSyncOutcome.failure(error)

    def _registered_states(self) -> list[SourceSyncState]:
        states = self._store.all_states()
        return [
            states.get(config.source_name) or SourceSyncState(source_name=config.source_name)
            for config in self._registry
        ]

    def _probe_config(self) -> SourceConfig | None:
        if self._probe_source:
            if self._probe_source in self._registry:
                return self._registry.get(self._probe_source)
            logger.warning(
                "Configured probe source is not registered source=%s; using the first source",
                self._probe_source,
            )
        return next(iter(self._registry), None)


@lru_cache(maxsize=1)
def get_sheet_sync_service() -> SheetSyncService:
    """
    Build and cache the sheet sync service.
    """

    sheets_settings = get_google_sheets_settings()
    sync_settings = get_sync_settings()
    client = GoogleSheetsClient.from_settings(
        settings=sheets_settings,
        http_settings=get_sheets_http_settings(),
    )
    registry = SheetRegistry(load_source_configs(config_path=sync_settings.sources_config_path))
    logger.info("Loaded sheet registry sources=%s", len(registry))
    return SheetSyncService(
        registry=registry,
        fetcher=SheetFetcher(client=client, range_spec=sheets_settings.range_spec),
        source_timeout_seconds=sync_settings.source_timeout_seconds,
        probe_source=sheets_settings.probe_source,
    )
