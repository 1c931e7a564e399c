"""
remote_panel/api/routers package marker.
"""

from remote_panel.api.routers.calls_router import router as calls_router
from remote_panel.api.routers.sync_router import router as sync_router

__all__ = [
    "calls_router",
    "sync_router",
]
