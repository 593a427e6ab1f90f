"""Local mirrors of hh.ru vacancies, negotiations and resumes."""

from datetime import UTC, datetime

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hiresync.core.storage import Base


def _utc_now() -> datetime:
    """Return current UTC time as timezone-naive datetime for DB storage."""
    return datetime.now(UTC).replace(tzinfo=None)


class Vacancy(Base):
    """Employer vacancy, refreshed on every sync pass."""

    __tablename__ = "hh_vacancies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    hh_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    info: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    info_updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, nullable=False
    )


class HhResponse(Base):
    """Candidate response (negotiation) to a vacancy. Written once."""

    __tablename__ = "hh_responses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    hh_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    refusal_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, nullable=False
    )


class Applicant(Base):
    """Resume owner, refreshed whenever one of their responses is ingested."""

    __tablename__ = "hh_applicants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    hh_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    resume: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    resume_updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, nullable=False
    )
