"""
remote_panel/normalization package marker.
"""

from remote_panel.normalization.row_normalizer import (
    CALL_DATE_FORMATS,
    STATUS_VOCABULARY,
    ParsedRows,
    RowNormalizer,
    get_cell_value,
    map_status,
    parse_call_date,
)

__all__ = [
    "CALL_DATE_FORMATS",
    "STATUS_VOCABULARY",
    "ParsedRows",
    "RowNormalizer",
    "get_cell_value",
    "map_status",
    "parse_call_date",
]
