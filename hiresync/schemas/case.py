"""Composite payload handed to the issue builder for each new response."""

from typing import Any

from pydantic import BaseModel, Field

from hiresync.utils.extractors import first_contact, safe_get


class CasePayload(BaseModel):
    """Everything the tracker needs to open an issue for one response."""

    vacancy_id: str
    resume_id: str
    hh_response_id: str
    vacancy_name: str | None = None
    vacancy_city: str | None = None
    vacancy_link: str | None = None
    applicant_city: str | None = None
    applicant_email: str | None = None
    applicant_first_name: str | None = None
    applicant_last_name: str | None = None
    applicant_middle_name: str | None = None
    applicant_birth_date: str | None = None
    applicant_photo: str | None = None
    resume_link: str | None = None
    salary: int | float | None = None
    experience: list[dict[str, Any]] = Field(default_factory=list)
    description: str | None = Field(None, description="Skills section of the resume")
    cover_letter: str | None = None

    @classmethod
    def from_remote(
        cls,
        vacancy: dict,
        resume: dict,
        cover_letter: str | None,
        hh_response_id: str,
    ) -> "CasePayload":
        """Build the payload from raw vacancy and resume JSON."""
        return cls(
            vacancy_id=str(vacancy["id"]),
            resume_id=str(resume["id"]),
            hh_response_id=str(hh_response_id),
            vacancy_name=vacancy.get("name"),
            vacancy_city=safe_get(vacancy, "area", "name"),
            vacancy_link=vacancy.get("alternate_url"),
            applicant_city=safe_get(resume, "area", "name"),
            applicant_email=first_contact(resume, "email"),
            applicant_first_name=resume.get("first_name"),
            applicant_last_name=resume.get("last_name"),
            applicant_middle_name=resume.get("middle_name"),
            applicant_birth_date=resume.get("birth_date"),
            applicant_photo=safe_get(resume, "photo", "medium"),
            resume_link=resume.get("alternate_url"),
            salary=safe_get(resume, "salary", "amount"),
            experience=resume.get("experience") or [],
            description=resume.get("skills"),
            cover_letter=cover_letter,
        )

    @property
    def applicant_full_name(self) -> str:
        parts = (
            self.applicant_last_name,
            self.applicant_first_name,
            self.applicant_middle_name,
        )
        return " ".join(p for p in parts if p)
