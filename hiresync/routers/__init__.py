"""API routers."""

from hiresync.routers.auth import router as auth_router
from hiresync.routers.hire import router as hire_router
from hiresync.routers.scheduler import router as scheduler_router

__all__ = ["auth_router", "hire_router", "scheduler_router"]
