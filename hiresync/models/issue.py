"""Tracker issues built from responses, and their journals."""

from datetime import UTC, datetime
from enum import StrEnum

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hiresync.core.storage import Base


def _utc_now() -> datetime:
    """Return current UTC time as timezone-naive datetime for DB storage."""
    return datetime.now(UTC).replace(tzinfo=None)


class IssueStatus(StrEnum):
    OPEN = "open"
    REFUSAL_SENT = "refusal_sent"


class Issue(Base):
    """One application under review.

    ``lock_version`` is the optimistic lock: every UPDATE is issued with
    ``WHERE lock_version = <loaded>`` and raises ``StaleDataError`` when
    another writer got there first.
    """

    __tablename__ = "issues"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(50), nullable=False, default=IssueStatus.OPEN
    )
    author_id: Mapped[int] = mapped_column(Integer, nullable=False)
    assigned_to_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    vacancy_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    resume_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    hh_response_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    details: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    lock_version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, onupdate=_utc_now, nullable=False
    )

    journals: Mapped[list["Journal"]] = relationship(
        back_populates="issue",
        cascade="all, delete-orphan",
        order_by="Journal.id",
    )

    __mapper_args__ = {"version_id_col": lock_version}

    def refusal(self) -> None:
        self.status = IssueStatus.REFUSAL_SENT


class Journal(Base):
    """Immutable audit note attached to an issue."""

    __tablename__ = "journals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    issue_id: Mapped[int] = mapped_column(
        ForeignKey("issues.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    notes: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, nullable=False
    )

    issue: Mapped[Issue] = relationship(back_populates="journals")
