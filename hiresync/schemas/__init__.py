"""Pydantic schemas for payloads and responses."""

from hiresync.schemas.case import CasePayload
from hiresync.schemas.sync import (
    RefusalDispatchResponse,
    SyncReport,
    SyncTriggerResponse,
    VacancyScope,
)

__all__ = [
    "CasePayload",
    "RefusalDispatchResponse",
    "SyncReport",
    "SyncTriggerResponse",
    "VacancyScope",
]
