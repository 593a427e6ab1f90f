"""Periodic hh.ru sync passes."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from hiresync.core.config import settings
from hiresync.schemas.sync import VacancyScope
from hiresync.services.hh_client import HHClient
from hiresync.services.sync_service import SyncService

logger = logging.getLogger(__name__)


class SyncScheduler:
    """Runs the active and archived sync passes on an interval."""

    _instance: "SyncScheduler | None" = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self._scheduler: AsyncIOScheduler | None = None
        self._running: dict[str, bool] = {}

    @staticmethod
    def job_id(scope: VacancyScope) -> str:
        return f"hh_sync_{scope.value}"

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    async def start(self):
        """Start the scheduler and register one job per vacancy scope."""
        if self.running:
            logger.info("Sync scheduler already running")
            return

        self._scheduler = AsyncIOScheduler(timezone=settings.sync_timezone)
        for scope in VacancyScope:
            self._scheduler.add_job(
                self.run_sync,
                trigger=IntervalTrigger(
                    minutes=settings.sync_interval_minutes,
                    timezone=settings.sync_timezone,
                ),
                id=self.job_id(scope),
                args=[scope],
                replace_existing=True,
                max_instances=1,
                coalesce=True,
            )
        self._scheduler.start()
        logger.info(
            f"Sync scheduler started, interval {settings.sync_interval_minutes} min"
        )

    async def stop(self):
        """Stop the scheduler."""
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
            logger.info("Sync scheduler stopped")

    async def run_sync(self, scope: VacancyScope):
        """Execute one sync pass unless one for the same scope is in flight."""
        if self._running.get(scope):
            logger.warning(f"{scope} sync already running, skipping")
            return

        self._running[scope] = True
        try:
            async with HHClient() as hh_client:
                await SyncService(hh_client).execute(scope)
        finally:
            self._running[scope] = False

    def get_status(self) -> dict:
        """Get scheduler status information."""
        if not self.running:
            return {"scheduler_running": False, "jobs": {}}

        jobs = {}
        for scope in VacancyScope:
            job = self._scheduler.get_job(self.job_id(scope))
            jobs[scope.value] = {
                "next_run": job.next_run_time.isoformat()
                if job and job.next_run_time
                else None,
                "in_progress": self._running.get(scope, False),
            }
        return {"scheduler_running": True, "jobs": jobs}


sync_scheduler = SyncScheduler()


def get_sync_scheduler() -> SyncScheduler:
    """FastAPI dependency for the sync scheduler."""
    return sync_scheduler
