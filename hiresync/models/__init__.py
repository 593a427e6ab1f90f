"""Database models."""

from hiresync.models.hh import Applicant, HhResponse, Vacancy
from hiresync.models.issue import Issue, IssueStatus, Journal
from hiresync.models.token import Token

__all__ = [
    "Applicant",
    "HhResponse",
    "Issue",
    "IssueStatus",
    "Journal",
    "Token",
    "Vacancy",
]
