"""
Structured logging helpers for sheet sync cycles.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any

from remote_panel.domain.sync import SyncErrorKind, SyncSummary


def _to_log_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit one structured log line as compact JSON; None-valued fields are dropped.
    """

    payload = {"event": event}
    payload.update({key: _to_log_value(value) for key, value in fields.items() if value is not None})
    logger.log(level, json.dumps(payload, default=str, sort_keys=True))


def sync_summary_fields(summary: SyncSummary) -> dict[str, Any]:
    """
    Flatten a sync summary into log fields.
    """

    failed_sources = {
        error.source_name
        for error in summary.errors
        if error.error_kind != SyncErrorKind.VALIDATION_ERROR
    }
    validation_sources = {
        error.source_name
        for error in summary.errors
        if error.error_kind == SyncErrorKind.VALIDATION_ERROR
    }
    return {
        "success": summary.success,
        "sheets_processed": summary.sheets_processed,
        "sheets_with_errors": summary.sheets_with_errors,
        "call_records_updated": summary.call_records_updated,
        "rows_with_errors": summary.rows_with_errors,
        "duration_seconds": round(summary.duration_seconds, 3),
        "failed_sources": sorted(failed_sources),
        "sources_with_validation_errors": sorted(validation_sources),
    }
