"""Schemas for sync runs and trigger endpoints."""

from enum import StrEnum

from pydantic import BaseModel, Field


class VacancyScope(StrEnum):
    """Which employer vacancy list a sync pass walks."""

    ACTIVE = "active"
    ARCHIVED = "archived"


class SyncReport(BaseModel):
    """Summary of a single sync pass."""

    scope: VacancyScope
    aborted: bool = Field(False, description="Vacancy list could not be fetched")
    vacancies_processed: int = 0
    vacancies_failed: int = 0
    responses_created: int = 0
    responses_skipped: int = 0


class RefusalDispatchResponse(BaseModel):
    """Result of a refusal trigger."""

    issue_id: int
    status: str = Field(..., description="dispatched or skipped")


class SyncTriggerResponse(BaseModel):
    scope: VacancyScope
    status: str = "started"
