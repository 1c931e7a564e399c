"""
remote_panel/domain/call_record.py

Canonical call record produced from one spreadsheet row.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class CallStatus(str, Enum):
    """
    Normalized call outcome vocabulary.
    """

    UNKNOWN = "unknown"
    NOT_MANAGED = "not_managed"
    IN_PROGRESS = "in_progress"
    NOT_CONTACTED = "not_contacted"
    CONTACTED = "contacted"
    NOT_INTERESTED = "not_interested"
    INTERESTED = "interested"
    CLOSED = "closed"


# Canonical field keys shared by the column mapper, validator and normalizer.
FIELD_SPONSOR = "sponsor"
FIELD_EXECUTIVE = "executive"
FIELD_CALL_DATE = "call_date"
FIELD_STATUS = "status"
FIELD_NOTES = "notes"

CANONICAL_FIELDS: tuple[str, ...] = (
    FIELD_SPONSOR,
    FIELD_EXECUTIVE,
    FIELD_CALL_DATE,
    FIELD_STATUS,
    FIELD_NOTES,
)

ColumnMap = dict[str, int]


@dataclass(frozen=True)
class CallRecord:
    """
    One call, as read from a source sheet row.
    """

    call_date: date
    executive_name: str
    sponsor_name: str
    source_name: str
    status: CallStatus
    notes: str
    last_updated: datetime
    total_calls: int = 1


@dataclass(frozen=True)
class RowParseError:
    """
    One data row that could not be normalized.
    """

    row_number: int
    message: str
