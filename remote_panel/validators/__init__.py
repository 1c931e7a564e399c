"""
remote_panel/validators package marker.
"""

from remote_panel.validators.column_validator import REQUIRED_CANONICAL_FIELDS, ColumnValidator

__all__ = [
    "REQUIRED_CANONICAL_FIELDS",
    "ColumnValidator",
]
