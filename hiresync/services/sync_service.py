"""Synchronization of hh.ru vacancies and responses into the tracker."""

import logging
from datetime import UTC, datetime

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hiresync.core.config import settings
from hiresync.core.exceptions import (
    DataIntegrityError,
    RemoteRequestError,
    TokenUnavailableError,
)
from hiresync.core.storage import async_session
from hiresync.models.hh import Applicant, HhResponse, Vacancy
from hiresync.models.issue import Issue, Journal
from hiresync.schemas.case import CasePayload
from hiresync.schemas.sync import SyncReport, VacancyScope
from hiresync.services.hh_client import HHClient
from hiresync.services.issue_builder import IssueBuilder
from hiresync.utils.extractors import find_refusal_url, safe_get

logger = logging.getLogger(__name__)


def _now() -> datetime:
    """Get current time as UTC naive datetime for DB storage."""
    return datetime.now(UTC).replace(tzinfo=None)


class SyncService:
    """Pulls employer vacancies and their new responses into local records.

    Each vacancy is ingested in its own transaction: a failing vacancy is
    rolled back and logged while the rest of the run carries on. Responses
    already known locally are skipped before any resume or message fetch,
    so re-running a pass is cheap and never duplicates issues.

    ``hh_client`` is only needed by ``execute``; the purge works offline.
    """

    def __init__(
        self,
        hh_client: HHClient | None = None,
        issue_builder: IssueBuilder | None = None,
        session_factory=None,
    ):
        self.hh_client = hh_client
        self.issue_builder = issue_builder or IssueBuilder()
        self._session_factory = session_factory or async_session

    async def execute(self, scope: VacancyScope | str) -> SyncReport:
        """Run one sync pass over the active or archived vacancy list."""
        scope = VacancyScope(scope)
        report = SyncReport(scope=scope)
        logger.info(f"Starting {scope} vacancies sync")

        try:
            vacancies = await self.hh_client.get_vacancies(scope)
        except RemoteRequestError as e:
            logger.error(
                f"Failed to list {scope} vacancies: status={e.status_code} "
                f"errors={e.errors}",
                exc_info=e,
            )
            report.aborted = True
            return report
        except TokenUnavailableError as e:
            logger.error(f"Failed to list {scope} vacancies: {e.detail}")
            report.aborted = True
            return report

        for vacancy in vacancies:
            try:
                created, skipped = await self._sync_vacancy(vacancy)
            except (
                RemoteRequestError,
                DataIntegrityError,
                TokenUnavailableError,
                IntegrityError,
            ) as e:
                report.vacancies_failed += 1
                self._log_vacancy_failure(vacancy, e)
                continue

            report.vacancies_processed += 1
            report.responses_created += created
            report.responses_skipped += skipped

        logger.info(
            f"Finished {scope} vacancies sync: "
            f"processed={report.vacancies_processed}, "
            f"failed={report.vacancies_failed}, "
            f"new_responses={report.responses_created}, "
            f"known_responses={report.responses_skipped}"
        )
        return report

    async def rollback(self) -> None:
        """Purge everything the sync created. Debugging aid only."""
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    select(Issue.id).where(
                        Issue.project == self.issue_builder.project_name,
                        Issue.resume_id.is_not(None),
                    )
                )
                issue_ids = list(result.scalars().all())

                if issue_ids:
                    await session.execute(
                        delete(Journal).where(Journal.issue_id.in_(issue_ids))
                    )
                    await session.execute(delete(Issue).where(Issue.id.in_(issue_ids)))
                await session.execute(delete(HhResponse))
                await session.execute(delete(Applicant))
                await session.execute(delete(Vacancy))

        logger.warning(f"Rolled back sync data: removed {len(issue_ids)} issues")

    async def _sync_vacancy(self, vacancy: dict) -> tuple[int, int]:
        created = 0
        skipped = 0

        async with self._session_factory() as session:
            async with session.begin():
                await self._save_vacancy(session, vacancy)

                responses = await self.hh_client.get_vacancy_responses(str(vacancy["id"]))
                for hh_response in responses:
                    if await self._response_exists(session, str(hh_response["id"])):
                        skipped += 1
                        continue
                    await self._ingest_response(session, vacancy, hh_response)
                    created += 1

        return created, skipped

    async def _ingest_response(
        self, session: AsyncSession, vacancy: dict, hh_response: dict
    ) -> None:
        response_id = str(hh_response["id"])
        self._save_response(session, hh_response)

        resume_url = safe_get(hh_response, "resume", "url")
        if not resume_url:
            raise DataIntegrityError(f"Resume missing for response {response_id}")

        resume = await self.hh_client.get_resume(resume_url)
        await self._save_applicant(session, resume)

        cover_letter = None
        if hh_response.get("messages_url"):
            cover_letter = await self.hh_client.get_cover_letter(
                hh_response["messages_url"]
            )

        payload = CasePayload.from_remote(vacancy, resume, cover_letter, response_id)
        await self.issue_builder.execute(session, payload)

    @staticmethod
    async def _save_vacancy(session: AsyncSession, vacancy: dict) -> Vacancy:
        hh_id = str(vacancy["id"])
        result = await session.execute(select(Vacancy).where(Vacancy.hh_id == hh_id))
        record = result.scalar_one_or_none()
        if record is None:
            record = Vacancy(hh_id=hh_id)
            session.add(record)

        record.info = vacancy
        record.info_updated_at = _now()
        return record

    @staticmethod
    async def _save_applicant(session: AsyncSession, resume: dict) -> Applicant:
        hh_id = str(resume["id"])
        result = await session.execute(select(Applicant).where(Applicant.hh_id == hh_id))
        record = result.scalar_one_or_none()
        if record is None:
            record = Applicant(hh_id=hh_id)
            session.add(record)

        record.resume = resume
        record.resume_updated_at = _now()
        return record

    @staticmethod
    def _save_response(session: AsyncSession, hh_response: dict) -> HhResponse:
        refusal_url = find_refusal_url(
            hh_response,
            settings.refusal_action_name,
            settings.refusal_template_name,
        )
        record = HhResponse(hh_id=str(hh_response["id"]), refusal_url=refusal_url)
        session.add(record)
        return record

    @staticmethod
    async def _response_exists(session: AsyncSession, hh_id: str) -> bool:
        result = await session.execute(
            select(HhResponse.id).where(HhResponse.hh_id == hh_id).limit(1)
        )
        return result.first() is not None

    @staticmethod
    def _log_vacancy_failure(vacancy: dict, error: Exception) -> None:
        if isinstance(error, RemoteRequestError):
            logger.error(
                f"hh.ru request failed while syncing vacancy {vacancy.get('id')}: "
                f"status={error.status_code} errors={error.errors}",
                exc_info=error,
            )
        elif isinstance(error, IntegrityError):
            logger.warning(
                f"Skipping vacancy {vacancy.get('id')}: records were written "
                f"concurrently ({error.orig})"
            )
        else:
            logger.error(
                f"Skipping vacancy {vacancy.get('id')}: {error}",
                exc_info=error,
            )
