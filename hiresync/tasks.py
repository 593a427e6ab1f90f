"""Background tasks for hiresync.

Refusal deliveries and sync passes run here when the RQ (Redis Queue)
worker is enabled. Each task builds its own hh.ru client and database
sessions and runs the async service code in a fresh event loop.
"""

import asyncio
import logging
from datetime import UTC, datetime
from typing import Any

from rq import Worker
from rq.job import Job

from hiresync.core.logging import setup_logging
from hiresync.schemas.sync import VacancyScope
from hiresync.services.dispatcher import get_queue
from hiresync.services.hh_client import HHClient
from hiresync.services.refusal_service import RefusalWorker
from hiresync.services.sync_service import SyncService

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(UTC).isoformat()


def enqueue_sync(scope: str) -> Job:
    """Enqueue a sync pass over the given vacancy list."""
    scope = VacancyScope(scope)
    logger.info(f"Enqueueing {scope} vacancies sync")

    return get_queue().enqueue(
        process_sync,
        scope.value,
        job_timeout="30m",
        description=f"Sync {scope} vacancies",
    )


def process_refusal(issue_id: int, refusal_url: str) -> dict[str, Any]:
    """Send one refusal in the worker process.

    Delivery failures are journaled by the worker itself; only a version
    conflict that outlived its retries escapes, failing the RQ job so it
    lands in the failed registry.
    """
    logger.info(f"Processing refusal for issue {issue_id}")

    sent = asyncio.run(_perform_refusal_async(issue_id, refusal_url))
    return {
        "issue_id": issue_id,
        "status": "sent" if sent else "failed",
        "timestamp": _timestamp(),
    }


def process_sync(scope: str) -> dict[str, Any]:
    """Run a sync pass in the worker process."""
    logger.info(f"Processing {scope} vacancies sync")

    report = asyncio.run(_run_sync_async(scope))
    return {**report.model_dump(mode="json"), "timestamp": _timestamp()}


async def _perform_refusal_async(issue_id: int, refusal_url: str) -> bool:
    async with HHClient() as hh_client:
        return await RefusalWorker(hh_client).perform(issue_id, refusal_url)


async def _run_sync_async(scope: str):
    async with HHClient() as hh_client:
        return await SyncService(hh_client).execute(scope)


def get_queue_status() -> dict[str, Any]:
    """Get current queue status and statistics."""
    queue = get_queue()
    return {
        "queue_name": queue.name,
        "pending_jobs": len(queue),
        "failed_jobs": len(queue.failed_job_registry),
        "workers": len(Worker.all(connection=queue.connection)),
        "timestamp": _timestamp(),
    }


def start_worker(burst: bool = False):
    """Start an RQ worker for hiresync tasks.

    Args:
        burst: If True, worker will exit when queue is empty
    """
    setup_logging()
    logger.info("Starting hiresync worker")

    queue = get_queue()
    worker = Worker([queue], connection=queue.connection, name="hiresync-worker")
    worker.work(burst=burst)


if __name__ == "__main__":
    import sys

    start_worker(burst="--burst" in sys.argv)
