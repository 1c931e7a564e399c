"""
remote_panel/mappers/column_mapper.py

Header-row mapping onto canonical call record fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from remote_panel.domain.call_record import (
    FIELD_CALL_DATE,
    FIELD_EXECUTIVE,
    FIELD_NOTES,
    FIELD_SPONSOR,
    FIELD_STATUS,
    ColumnMap,
)


@dataclass(frozen=True)
class ColumnRule:
    """
    Substring rule assigning a header cell to one canonical field.
    """

    canonical_field: str
    includes: tuple[str, ...]
    excludes: tuple[str, ...] = ()

    def matches(self, normalized_header: str) -> bool:
        if not any(token in normalized_header for token in self.includes):
            return False
        return not any(token in normalized_header for token in self.excludes)


DEFAULT_COLUMN_RULES: tuple[ColumnRule, ...] = (
    ColumnRule(FIELD_SPONSOR, ("sponsor",)),
    ColumnRule(FIELD_EXECUTIVE, ("ejecutivo", "executive")),
    ColumnRule(FIELD_CALL_DATE, ("fecha_llamada", "fecha llamada", "call_date", "call date")),
    ColumnRule(FIELD_STATUS, ("estado", "status"), excludes=("sub", "compromiso")),
    ColumnRule(FIELD_NOTES, ("nota", "observ", "comment")),
    # Plain date headers; evaluated last so other fields take precedence.
    ColumnRule(
        FIELD_CALL_DATE,
        ("fecha", "date"),
        excludes=("compromiso", "update", "actualiz", "nacimiento", "birth"),
    ),
)


def normalize_header(header: object) -> str:
    """
    Lower-case and trim a header cell for substring matching.
    """

    if header is None:
        return ""
    return str(header).strip().lower()


class ColumnMapper:
    """
    Maps a header row to canonical field column indexes.

    Rules are evaluated in order per header cell and the first matching rule
    wins for that cell. When several headers match the same field, the last
    one (rightmost column) wins. Unmatched headers are ignored.
    """

    def __init__(self, rules: Sequence[ColumnRule] | None = None) -> None:
        self._rules = tuple(rules or DEFAULT_COLUMN_RULES)

    @property
    def rules(self) -> tuple[ColumnRule, ...]:
        return self._rules

    def map_columns(self, headers: Sequence[object]) -> ColumnMap:
        column_map: ColumnMap = {}
        for index, header in enumerate(headers):
            canonical_field = self.match_header(header)
            if canonical_field is not None:
                column_map[canonical_field] = index
        return column_map

    def match_header(self, header: object) -> str | None:
        normalized = normalize_header(header)
        if not normalized:
            return None
        for rule in self._rules:
            if rule.matches(normalized):
                return rule.canonical_field
        return None
