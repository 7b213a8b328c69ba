"""API routers."""

from duet.routers.auth import router as auth_router
from duet.routers.gate import router as gate_router
from duet.routers.presence import router as presence_router
from duet.routers.recordings import router as recordings_router
from duet.routers.storage import router as storage_router

__all__ = ["auth_router", "gate_router", "presence_router", "recordings_router", "storage_router"]
