"""Dispatch of refusal deliveries: inline, or through the RQ queue."""

import logging
from collections.abc import Awaitable, Callable
from functools import lru_cache
from typing import Protocol

from redis import Redis
from rq import Queue

from hiresync.core.config import settings

logger = logging.getLogger(__name__)

REFUSAL_TASK = "hiresync.tasks.process_refusal"


@lru_cache(maxsize=1)
def get_queue() -> Queue:
    """Queue shared by the API process and the workers."""
    return Queue(settings.queue_name, connection=Redis.from_url(settings.redis_url))


class Dispatcher(Protocol):
    async def dispatch(self, issue_id: int, refusal_url: str) -> None: ...


class InlineDispatcher:
    """Runs the refusal right away in the caller's context."""

    def __init__(self, perform: Callable[[int, str], Awaitable[object]]):
        self._perform = perform

    async def dispatch(self, issue_id: int, refusal_url: str) -> None:
        await self._perform(issue_id, refusal_url)


class QueueDispatcher:
    """Hands the refusal to an RQ worker."""

    def __init__(self, queue: Queue):
        self.queue = queue

    async def dispatch(self, issue_id: int, refusal_url: str) -> None:
        job = self.queue.enqueue(
            REFUSAL_TASK,
            issue_id,
            refusal_url,
            job_timeout="5m",
            description=f"Send refusal for issue {issue_id}",
        )
        logger.info(f"Enqueued refusal for issue {issue_id} as job {job.id}")


def build_dispatcher(perform: Callable[[int, str], Awaitable[object]]) -> Dispatcher:
    """Pick the dispatcher configured for this process."""
    if settings.queue_enabled:
        return QueueDispatcher(get_queue())
    return InlineDispatcher(perform)
