"""hiresync - hh.ru recruitment sync and refusal delivery."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from hiresync.core.config import settings
from hiresync.core.logging import setup_logging
from hiresync.core.storage import init_models
from hiresync.routers import auth_router, hire_router, scheduler_router
from hiresync.services.scheduler_service import sync_scheduler

setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Initializing application...")
    await init_models()

    if settings.sync_enabled:
        logger.info("Starting sync scheduler...")
        await sync_scheduler.start()

    logger.info(
        f"Application initialized (refusal dispatch: "
        f"{'queue' if settings.queue_enabled else 'inline'})"
    )

    yield

    logger.info("Shutting down...")
    await sync_scheduler.stop()
    logger.info("Shutdown complete")


app = FastAPI(
    title="hiresync",
    description="hh.ru recruitment sync and refusal delivery",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(auth_router)
app.include_router(hire_router)
app.include_router(scheduler_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "hiresync",
        "scheduler": sync_scheduler.get_status(),
        "queue_enabled": settings.queue_enabled,
    }
