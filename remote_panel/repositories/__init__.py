"""
remote_panel/repositories package marker.
"""

from remote_panel.repositories.source_state_repository import (
    InMemorySourceStateRepository,
    SourceStateRepository,
)

__all__ = [
    "InMemorySourceStateRepository",
    "SourceStateRepository",
]
