"""Builds tracker issues from ingested responses."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from hiresync.core.config import settings
from hiresync.models.issue import Issue, IssueStatus
from hiresync.schemas.case import CasePayload

logger = logging.getLogger(__name__)


class IssueBuilder:
    """Creates one issue per new response inside the caller's transaction."""

    def __init__(
        self,
        project_name: str | None = None,
        author_id: int | None = None,
        assignee_id: int | None = None,
    ):
        self.project_name = project_name or settings.issue_project_name
        self.author_id = author_id if author_id is not None else settings.issue_author_id
        self.assignee_id = (
            assignee_id if assignee_id is not None else settings.issue_assignee_id
        )

    async def execute(self, session: AsyncSession, payload: CasePayload) -> Issue:
        issue = Issue(
            project=self.project_name,
            subject=self._subject(payload),
            description=self._description(payload),
            status=IssueStatus.OPEN,
            author_id=self.author_id,
            assigned_to_id=self.assignee_id,
            vacancy_id=payload.vacancy_id,
            resume_id=payload.resume_id,
            hh_response_id=payload.hh_response_id,
            details=payload.model_dump(mode="json"),
        )
        session.add(issue)
        await session.flush()

        logger.info(
            f"Created issue {issue.id} for response {payload.hh_response_id} "
            f"(vacancy {payload.vacancy_id})"
        )
        return issue

    @staticmethod
    def _subject(payload: CasePayload) -> str:
        name = payload.applicant_full_name or f"Resume {payload.resume_id}"
        if payload.vacancy_name:
            return f"{name} - {payload.vacancy_name}"[:255]
        return name[:255]

    @staticmethod
    def _description(payload: CasePayload) -> str:
        lines = [
            f"Vacancy: {payload.vacancy_name or payload.vacancy_id}",
            f"Vacancy city: {payload.vacancy_city or '-'}",
            f"Vacancy link: {payload.vacancy_link or '-'}",
            f"Applicant city: {payload.applicant_city or '-'}",
            f"Email: {payload.applicant_email or '-'}",
            f"Birth date: {payload.applicant_birth_date or '-'}",
            f"Salary: {payload.salary if payload.salary is not None else '-'}",
            f"Resume: {payload.resume_link or '-'}",
        ]
        if payload.description:
            lines += ["", "Skills:", payload.description]
        if payload.cover_letter:
            lines += ["", "Cover letter:", payload.cover_letter]
        return "\n".join(lines)
