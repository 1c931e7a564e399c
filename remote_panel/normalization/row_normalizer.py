"""
remote_panel/normalization/row_normalizer.py

Conversion of raw sheet rows into canonical call records.

Dates go through an explicit format chain, then a flexible day-first parse,
and finally fall back to today's date. Status text is matched as an exact
phrase against a fixed Spanish vocabulary (accented and ASCII spellings).
Each row counts as one call.
"""

from __future__ import annotations

import logging
import unicodedata
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone

from dateutil import parser as dateparser

from remote_panel.domain.call_record import (
    FIELD_CALL_DATE,
    FIELD_EXECUTIVE,
    FIELD_NOTES,
    FIELD_SPONSOR,
    FIELD_STATUS,
    CallRecord,
    CallStatus,
    ColumnMap,
    RowParseError,
)

logger = logging.getLogger(__name__)

CALL_DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%m/%d/%Y",
    "%d-%m-%Y",
    "%Y/%m/%d",
    "%Y-%m-%d %H:%M:%S",
    "%d/%m/%Y %H:%M:%S",
)

STATUS_VOCABULARY: dict[str, CallStatus] = {
    "sin gestión": CallStatus.NOT_MANAGED,
    "sin gestion": CallStatus.NOT_MANAGED,
    "en gestión": CallStatus.IN_PROGRESS,
    "en gestion": CallStatus.IN_PROGRESS,
    "no contactado": CallStatus.NOT_CONTACTED,
    "contactado": CallStatus.CONTACTED,
    "sin interés": CallStatus.NOT_INTERESTED,
    "sin interes": CallStatus.NOT_INTERESTED,
    "interesado": CallStatus.INTERESTED,
    "cerrado": CallStatus.CLOSED,
}

# Sheet row 1 is the header, so the first data row is row 2.
FIRST_DATA_ROW_NUMBER = 2


def _normalize_status_text(value: str) -> str:
    text = unicodedata.normalize("NFC", value).strip().lower()
    return " ".join(text.split())


def map_status(value: str | None) -> CallStatus:
    """
    Map free-text status to CallStatus; anything outside the vocabulary is UNKNOWN.
    """

    if not value:
        return CallStatus.UNKNOWN
    return STATUS_VOCABULARY.get(_normalize_status_text(value), CallStatus.UNKNOWN)


def parse_call_date(value: str | None, *, today: date | None = None) -> date:
    """
    Parse a call date cell. Unparseable or empty values become today's date.
    """

    fallback = today or date.today()
    raw = (value or "").strip()
    if not raw:
        return fallback

    for date_format in CALL_DATE_FORMATS:
        try:
            return datetime.strptime(raw, date_format).date()
        except ValueError:
            continue

    # Parts missing from the cell are taken from the fallback day.
    try:
        return dateparser.parse(
            raw,
            dayfirst=True,
            default=datetime.combine(fallback, time()),
        ).date()
    except (ValueError, OverflowError):
        logger.debug("Unparseable call date %r; using %s", raw, fallback.isoformat())
        return fallback


def get_cell_value(row: Sequence[object], column_map: ColumnMap, canonical_field: str) -> str:
    """
    Read one canonical field from a row; missing columns read as an empty string.
    """

    index = column_map.get(canonical_field)
    if index is None or index >= len(row):
        return ""
    value = row[index]
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class ParsedRows:
    """
    Outcome of normalizing all data rows of one source.
    """

    records: list[CallRecord] = field(default_factory=list)
    processed_rows: int = 0
    skipped_rows: int = 0
    row_errors: list[RowParseError] = field(default_factory=list)

    @property
    def error_rows(self) -> int:
        return len(self.row_errors)


class RowNormalizer:
    """
    Builds CallRecord values from raw rows and a column map.
    """

    def __init__(
        self,
        *,
        today_provider: Callable[[], date] = date.today,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._today_provider = today_provider
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))

    def parse_row(
        self,
        row: Sequence[object],
        column_map: ColumnMap,
        source_name: str,
        *,
        sponsor_fallback: str = "",
    ) -> CallRecord | None:
        """
        Return a CallRecord, or None when the row has no executive name.
        """

        executive_name = get_cell_value(row, column_map, FIELD_EXECUTIVE)
        if not executive_name:
            return None

        return CallRecord(
            call_date=parse_call_date(
                get_cell_value(row, column_map, FIELD_CALL_DATE),
                today=self._today_provider(),
            ),
            executive_name=executive_name,
            sponsor_name=get_cell_value(row, column_map, FIELD_SPONSOR) or sponsor_fallback,
            source_name=source_name,
            status=map_status(get_cell_value(row, column_map, FIELD_STATUS)),
            notes=get_cell_value(row, column_map, FIELD_NOTES),
            last_updated=self._clock(),
            total_calls=1,
        )

    def parse_rows(
        self,
        rows: Sequence[Sequence[object]],
        column_map: ColumnMap,
        source_name: str,
        *,
        sponsor_fallback: str = "",
    ) -> ParsedRows:
        """
        Normalize every data row; failing rows are logged, counted and skipped.
        """

        records: list[CallRecord] = []
        row_errors: list[RowParseError] = []
        skipped = 0

        for offset, row in enumerate(rows):
            row_number = FIRST_DATA_ROW_NUMBER + offset
            try:
                record = self.parse_row(
                    row,
                    column_map,
                    source_name,
                    sponsor_fallback=sponsor_fallback,
                )
            except Exception as exc:
                logger.warning(
                    "Failed to parse row source=%s row=%s error=%s",
                    source_name,
                    row_number,
                    exc,
                )
                row_errors.append(RowParseError(row_number=row_number, message=str(exc)))
                continue

            if record is None:
                skipped += 1
                continue
            records.append(record)

        return ParsedRows(
            records=records,
            processed_rows=len(rows),
            skipped_rows=skipped,
            row_errors=row_errors,
        )
