"""Application services."""

from hiresync.services.hh_client import HHClient
from hiresync.services.refusal_service import RefusalService, RefusalWorker
from hiresync.services.sync_service import SyncService

__all__ = ["HHClient", "RefusalService", "RefusalWorker", "SyncService"]
