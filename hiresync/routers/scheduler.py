"""API routes for the periodic sync scheduler."""

from fastapi import APIRouter, Depends

from hiresync.core.config import settings
from hiresync.services.scheduler_service import SyncScheduler, get_sync_scheduler

router = APIRouter(prefix="/scheduler", tags=["scheduler"])


@router.get("/status")
async def get_scheduler_status(
    scheduler: SyncScheduler = Depends(get_sync_scheduler),
):
    """Get the current scheduler status."""
    return scheduler.get_status()


@router.post("/start")
async def start_scheduler(
    scheduler: SyncScheduler = Depends(get_sync_scheduler),
):
    """Register the periodic sync jobs."""
    await scheduler.start()
    return scheduler.get_status()


@router.post("/stop")
async def stop_scheduler(
    scheduler: SyncScheduler = Depends(get_sync_scheduler),
):
    """Remove the periodic sync jobs."""
    await scheduler.stop()
    return scheduler.get_status()


@router.get("/queue")
async def get_queue_status():
    """Report RQ queue statistics when the worker queue is enabled."""
    if not settings.queue_enabled:
        return {"queue_enabled": False}

    from hiresync.tasks import get_queue_status as queue_status

    return {"queue_enabled": True, **queue_status()}
