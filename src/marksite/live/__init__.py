"""Live layer — live server lifecycle and the rebuild loop."""

from marksite.live.coordinator import RebuildCoordinator
from marksite.live.server import LiveServer, ServerSession
from marksite.live.static import create_site_app

__all__ = [
    "LiveServer",
    "RebuildCoordinator",
    "ServerSession",
    "create_site_app",
]
