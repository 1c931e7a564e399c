"""
remote_panel/registry package marker.
"""

from remote_panel.registry.loader import load_source_configs
from remote_panel.registry.sheet_registry import SheetRegistry

__all__ = [
    "SheetRegistry",
    "load_source_configs",
]
