"""Tests for the composite case payload."""

from hiresync.schemas.case import CasePayload
from tests.support import make_resume, make_vacancy


class TestCasePayload:
    """Tests for CasePayload.from_remote."""

    def test_from_remote_maps_fields(self):
        payload = CasePayload.from_remote(
            make_vacancy("v1"), make_resume("r1"), "Hello!", "n1"
        )

        assert payload.vacancy_id == "v1"
        assert payload.vacancy_name == "Python Developer"
        assert payload.vacancy_city == "Москва"
        assert payload.vacancy_link == "https://hh.ru/vacancy/v1"
        assert payload.resume_id == "r1"
        assert payload.hh_response_id == "n1"
        assert payload.applicant_city == "Санкт-Петербург"
        assert payload.applicant_email == "r1@example.com"
        assert payload.applicant_birth_date == "1990-05-01"
        assert payload.applicant_photo == "https://img.hh.ru/r1.jpg"
        assert payload.salary == 250000
        assert payload.experience == [{"company": "Acme", "position": "Developer"}]
        assert payload.description == "Python, SQL"
        assert payload.resume_link == "https://hh.ru/resume/r1"
        assert payload.cover_letter == "Hello!"

    def test_optional_sections_missing(self):
        resume = {"id": 5, "first_name": "Анна", "photo": None, "salary": None}

        payload = CasePayload.from_remote({"id": 3}, resume, None, 77)

        assert payload.vacancy_id == "3"
        assert payload.resume_id == "5"
        assert payload.hh_response_id == "77"
        assert payload.applicant_photo is None
        assert payload.salary is None
        assert payload.applicant_email is None
        assert payload.experience == []
        assert payload.cover_letter is None

    def test_full_name_skips_blank_parts(self):
        payload = CasePayload(
            vacancy_id="1",
            resume_id="2",
            hh_response_id="3",
            applicant_first_name="Анна",
            applicant_last_name="Иванова",
        )
        assert payload.applicant_full_name == "Иванова Анна"
