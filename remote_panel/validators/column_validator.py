"""
remote_panel/validators/column_validator.py

Validation of resolved column maps against the required canonical fields.
"""

from __future__ import annotations

import logging
from typing import Sequence

from remote_panel.domain.call_record import (
    CANONICAL_FIELDS,
    FIELD_EXECUTIVE,
    FIELD_SPONSOR,
    FIELD_STATUS,
    ColumnMap,
)
from remote_panel.domain.sync import ColumnValidationReport

logger = logging.getLogger(__name__)

REQUIRED_CANONICAL_FIELDS: tuple[str, ...] = (
    FIELD_SPONSOR,
    FIELD_EXECUTIVE,
    FIELD_STATUS,
)


class ColumnValidator:
    """
    Reports required canonical fields a header row did not provide.

    A failed report never stops the rows that could be parsed from being cached.
    """

    def __init__(
        self,
        *,
        required_fields: Sequence[str] = REQUIRED_CANONICAL_FIELDS,
        canonical_fields: Sequence[str] = CANONICAL_FIELDS,
    ) -> None:
        unknown = [field for field in required_fields if field not in canonical_fields]
        if unknown:
            raise ValueError(f"Required fields are not canonical: {', '.join(unknown)}.")
        self._required_fields = tuple(required_fields)

    def validate(
        self,
        *,
        column_map: ColumnMap,
        headers: Sequence[str],
        source_name: str,
    ) -> ColumnValidationReport:
        missing = tuple(field for field in self._required_fields if field not in column_map)
        if missing:
            logger.warning(
                "Sheet header is missing required columns source=%s missing=%s",
                source_name,
                ",".join(missing),
            )
        return ColumnValidationReport(
            source_name=source_name,
            is_valid=not missing,
            missing_columns=missing,
            headers=tuple(headers),
        )
