"""
remote_panel/mappers package marker.
"""

from remote_panel.mappers.column_mapper import (
    DEFAULT_COLUMN_RULES,
    ColumnMapper,
    ColumnRule,
    normalize_header,
)

__all__ = [
    "DEFAULT_COLUMN_RULES",
    "ColumnMapper",
    "ColumnRule",
    "normalize_header",
]
