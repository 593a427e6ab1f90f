"""Delivery of candidate refusals to hh.ru."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from hiresync.core.exceptions import (
    ApplicationError,
    ConcurrencyConflictError,
    DataIntegrityError,
    RemoteRequestError,
    TokenUnavailableError,
)
from hiresync.core.retry import retry_async
from hiresync.core.storage import async_session
from hiresync.models.hh import HhResponse
from hiresync.models.issue import Issue, Journal
from hiresync.services.dispatcher import Dispatcher, build_dispatcher
from hiresync.services.hh_client import HHClient
from hiresync.utils.extractors import safe_get

logger = logging.getLogger(__name__)

REFUSAL_SENT_NOTE = "Отказ отправлен."
REFUSAL_FAILED_NOTE = "Отказ не отправлен, произошла ошибка."


def _now() -> datetime:
    """Get current time as UTC naive datetime for DB storage."""
    return datetime.now(UTC).replace(tzinfo=None)


def _is_stale(error: Exception) -> bool:
    return isinstance(error, StaleDataError)


class RefusalWorker:
    """Sends one refusal and records the outcome on the issue."""

    MAX_WRITE_ATTEMPTS = 3

    def __init__(self, hh_client: HHClient, session_factory=None):
        self.hh_client = hh_client
        self._session_factory = session_factory or async_session

    async def perform(self, issue_id: int, refusal_url: str) -> bool:
        """Deliver the refusal; returns True if hh.ru accepted it."""
        async with self._session_factory() as session:
            issue = await session.get(Issue, issue_id)
            response_id = issue.hh_response_id if issue else None

        if response_id is None:
            logger.warning(f"Issue {issue_id} disappeared before its refusal was sent")
            return False

        try:
            template = await self.hh_client.get_refusal_template(refusal_url)
            message = safe_get(template, "mail", "text")
            if not message:
                raise DataIntegrityError(
                    f"Refusal template {refusal_url} has no mail text"
                )
            await self.hh_client.discard_response(response_id, message)
        except RemoteRequestError as e:
            logger.error(
                f"Refusal for issue {issue_id} (response {response_id}) failed: "
                f"status={e.status_code} errors={e.errors}",
                exc_info=e,
            )
            await self.write_journal(issue_id, self._record_failure)
            return False
        except (DataIntegrityError, TokenUnavailableError) as e:
            logger.error(
                f"Refusal for issue {issue_id} (response {response_id}) failed: {e.message}",
                exc_info=e,
            )
            await self.write_journal(issue_id, self._record_failure)
            return False

        await self.write_journal(issue_id, self._record_success)
        logger.info(f"Refusal sent for issue {issue_id} (response {response_id})")
        return True

    async def write_journal(
        self, issue_id: int, mutate: Callable[[AsyncSession, Issue], None]
    ) -> None:
        """Apply ``mutate`` to a freshly loaded issue in one transaction.

        A version conflict reloads the issue and repeats the whole block,
        up to ``MAX_WRITE_ATTEMPTS`` times in total.
        """

        async def attempt() -> None:
            async with self._session_factory() as session:
                async with session.begin():
                    issue = await session.get(Issue, issue_id)
                    if issue is None:
                        raise ApplicationError(f"Issue {issue_id} not found")
                    mutate(session, issue)

        async def on_conflict(error: Exception, attempt_no: int) -> bool:
            logger.warning(
                f"Issue {issue_id} was changed concurrently, reloading "
                f"({attempt_no}/{self.MAX_WRITE_ATTEMPTS})"
            )
            return True

        result = await retry_async(
            attempt,
            attempts=self.MAX_WRITE_ATTEMPTS,
            retry_on=_is_stale,
            before_retry=on_conflict,
        )
        if result.ok:
            return
        if _is_stale(result.error):
            logger.error(
                f"Giving up on issue {issue_id} after {result.attempts} conflicting writes"
            )
            raise ConcurrencyConflictError(issue_id, result.attempts) from result.error
        result.unwrap()

    @staticmethod
    def _record_success(session: AsyncSession, issue: Issue) -> None:
        issue.refusal()
        issue.updated_at = _now()
        session.add(
            Journal(issue_id=issue.id, user_id=issue.author_id, notes=REFUSAL_SENT_NOTE)
        )

    @staticmethod
    def _record_failure(session: AsyncSession, issue: Issue) -> None:
        issue.updated_at = _now()
        session.add(
            Journal(issue_id=issue.id, user_id=issue.author_id, notes=REFUSAL_FAILED_NOTE)
        )


class RefusalService:
    """Entry point for refusing a candidate from an issue."""

    def __init__(
        self,
        hh_client: HHClient,
        dispatcher: Dispatcher | None = None,
        session_factory=None,
    ):
        self._session_factory = session_factory or async_session
        self.worker = RefusalWorker(hh_client, self._session_factory)
        self.dispatcher = dispatcher or build_dispatcher(self.worker.perform)

    async def send_refusal(self, issue_id: int) -> bool:
        """Dispatch a refusal for the issue's response.

        Returns False without doing anything when the issue, its response,
        or the response's refusal URL is missing.
        """
        refusal_url = await self._refusal_url(issue_id)
        if not refusal_url:
            logger.info(f"No refusal available for issue {issue_id}, nothing to send")
            return False

        await self.dispatcher.dispatch(issue_id, refusal_url)
        return True

    async def _refusal_url(self, issue_id: int) -> str | None:
        async with self._session_factory() as session:
            issue = await session.get(Issue, issue_id)
            if issue is None:
                return None

            result = await session.execute(
                select(HhResponse.refusal_url).where(
                    HhResponse.hh_id == issue.hh_response_id
                )
            )
            refusal_url = result.scalar_one_or_none()

        if refusal_url is None or not refusal_url.strip():
            return None
        return refusal_url
