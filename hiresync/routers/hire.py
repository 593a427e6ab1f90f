"""Trigger endpoints for refusals and sync passes."""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends

from hiresync.core.config import settings
from hiresync.core.exceptions import (
    ConcurrencyConflictError,
    TokenUnavailableError,
    bad_gateway_exception,
    conflict_exception,
)
from hiresync.schemas.sync import (
    RefusalDispatchResponse,
    SyncTriggerResponse,
    VacancyScope,
)
from hiresync.services.hh_client import HHClient, get_hh_client
from hiresync.services.refusal_service import RefusalService
from hiresync.services.scheduler_service import SyncScheduler, get_sync_scheduler
from hiresync.services.sync_service import SyncService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["hire"])


def get_refusal_service(hh: HHClient = Depends(get_hh_client)) -> RefusalService:
    return RefusalService(hh)


@router.post(
    "/issues/{issue_id}/refusal_response", response_model=RefusalDispatchResponse
)
async def refusal_response(
    issue_id: int,
    service: RefusalService = Depends(get_refusal_service),
):
    """Send the quick-refusal message for the issue's response."""
    try:
        dispatched = await service.send_refusal(issue_id)
    except ConcurrencyConflictError as e:
        logger.error(f"Refusal for issue {issue_id} not recorded: {e.message}")
        raise conflict_exception(e.message)
    except TokenUnavailableError as e:
        raise bad_gateway_exception(e.detail)

    return RefusalDispatchResponse(
        issue_id=issue_id,
        status="dispatched" if dispatched else "skipped",
    )


@router.post("/sync/rollback")
async def rollback_sync():
    """Delete all synced records. Debugging only."""
    await SyncService().rollback()
    return {"status": "rolled_back"}


@router.post("/sync/{scope}", response_model=SyncTriggerResponse)
async def trigger_sync(
    scope: VacancyScope,
    background_tasks: BackgroundTasks,
    scheduler: SyncScheduler = Depends(get_sync_scheduler),
):
    """Start a sync pass over active or archived vacancies."""
    if settings.queue_enabled:
        from hiresync.tasks import enqueue_sync

        job = enqueue_sync(scope.value)
        logger.info(f"{scope} sync queued as job {job.id}")
        return SyncTriggerResponse(scope=scope, status="queued")

    background_tasks.add_task(scheduler.run_sync, scope)
    return SyncTriggerResponse(scope=scope, status="started")
