"""Integration tests for the hh.ru client over a mock transport."""

from urllib.parse import parse_qs

import httpx
import pytest

from hiresync.core.exceptions import RemoteRequestError
from hiresync.schemas.sync import VacancyScope
from tests.support import FakeTokenProvider, token_expired_response


class TestGet:
    """GET path: headers, decoding and token refresh."""

    @pytest.mark.asyncio
    async def test_injects_auth_and_client_headers(self, hh_client, fake_hh):
        fake_hh.json("GET", "/me", {"id": "1"})

        result = await hh_client.get("/me")

        assert result == {"id": "1"}
        request = fake_hh.requests[0]
        assert request.headers["Authorization"] == "Bearer token-1"
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["User-Agent"].startswith("hiresync/")

    @pytest.mark.asyncio
    async def test_absolute_urls_are_used_as_is(self, hh_client, fake_hh):
        fake_hh.json("GET", "/resumes/r1", {"id": "r1"})

        result = await hh_client.get("https://api.hh.ru/resumes/r1?with_job_search_status=true")

        assert result["id"] == "r1"
        assert fake_hh.requests[0].url.params["with_job_search_status"] == "true"

    @pytest.mark.asyncio
    async def test_token_refresh_is_transparent(
        self, hh_client, fake_hh, token_provider
    ):
        fake_hh.json("GET", "/me", token_expired_response(), {"id": "1"})

        result = await hh_client.get("/me")

        assert result == {"id": "1"}
        assert token_provider.reissue_calls == 1
        assert len(fake_hh.calls("GET", "/me")) == 2
        # the retried request carries the reissued token
        assert fake_hh.requests[1].headers["Authorization"] == "Bearer token-2"

    @pytest.mark.asyncio
    async def test_retry_exhaustion_propagates(self, hh_client, fake_hh, token_provider):
        fake_hh.json("GET", "/me", token_expired_response())

        with pytest.raises(RemoteRequestError) as exc_info:
            await hh_client.get("/me")

        assert exc_info.value.status_code == 403
        assert exc_info.value.is_token_expired
        assert token_provider.reissue_calls == 2
        assert len(fake_hh.calls("GET", "/me")) == 3

    @pytest.mark.asyncio
    async def test_retry_budget_is_per_call(self, hh_client, fake_hh, token_provider):
        fake_hh.json(
            "GET",
            "/me",
            token_expired_response(),
            token_expired_response(),
            {"id": "1"},
            token_expired_response(),
            token_expired_response(),
            {"id": "2"},
        )

        assert await hh_client.get("/me") == {"id": "1"}
        assert await hh_client.get("/me") == {"id": "2"}
        assert token_provider.reissue_calls == 4

    @pytest.mark.asyncio
    async def test_failed_reissue_stops_retrying(self, fake_hh):
        from hiresync.services.hh_client import HHClient

        provider = FakeTokenProvider(reissue_ok=False)
        fake_hh.json("GET", "/me", token_expired_response())

        async with HHClient(provider, "42", transport=fake_hh.transport()) as client:
            with pytest.raises(RemoteRequestError):
                await client.get("/me")

        assert provider.reissue_calls == 1
        assert len(fake_hh.calls("GET", "/me")) == 1

    @pytest.mark.asyncio
    async def test_other_forbidden_errors_not_retried(
        self, hh_client, fake_hh, token_provider
    ):
        fake_hh.json(
            "GET",
            "/me",
            {"errors": [{"type": "forbidden"}]},
            status_code=403,
        )

        with pytest.raises(RemoteRequestError) as exc_info:
            await hh_client.get("/me")

        assert exc_info.value.errors == [{"type": "forbidden"}]
        assert token_provider.reissue_calls == 0
        assert len(fake_hh.requests) == 1

    @pytest.mark.asyncio
    async def test_non_json_error_body(self, hh_client, fake_hh):
        fake_hh.route("GET", "/me", lambda request: httpx.Response(502, text="Bad Gateway"))

        with pytest.raises(RemoteRequestError) as exc_info:
            await hh_client.get("/me")

        assert exc_info.value.status_code == 502
        assert exc_info.value.errors == []

    @pytest.mark.asyncio
    async def test_network_error_becomes_request_error(self, hh_client, fake_hh):
        def broken(request):
            raise httpx.ConnectError("connection refused", request=request)

        fake_hh.route("GET", "/me", broken)

        with pytest.raises(RemoteRequestError) as exc_info:
            await hh_client.get("/me")

        assert exc_info.value.status_code == 503


class TestPost:
    """POST path: no retries, form body."""

    @pytest.mark.asyncio
    async def test_post_is_not_retried_on_token_expiry(
        self, hh_client, fake_hh, token_provider
    ):
        fake_hh.route("POST", "/negotiations/discard_by_employer/n1", lambda r: token_expired_response())

        with pytest.raises(RemoteRequestError) as exc_info:
            await hh_client.discard_response("n1", "Sorry")

        assert exc_info.value.is_token_expired
        assert token_provider.reissue_calls == 0
        assert len(fake_hh.requests) == 1

    @pytest.mark.asyncio
    async def test_discard_sends_message_form(self, hh_client, fake_hh):
        fake_hh.route(
            "POST", "/negotiations/discard_by_employer/n1", lambda r: httpx.Response(204)
        )

        response = await hh_client.discard_response("n1", "Sorry")

        assert response.status_code == 204
        request = fake_hh.requests[0]
        assert request.headers["Authorization"] == "Bearer token-1"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert parse_qs(request.content.decode()) == {"message": ["Sorry"]}

    @pytest.mark.asyncio
    async def test_empty_post(self, hh_client, fake_hh):
        fake_hh.route("POST", "/ping", lambda r: httpx.Response(201))

        response = await hh_client.post("/ping")

        assert response.status_code == 201
        assert fake_hh.requests[0].content == b""


class TestEndpoints:
    """Endpoint helpers and pagination."""

    @pytest.mark.asyncio
    async def test_vacancy_lists_by_scope(self, hh_client, fake_hh):
        fake_hh.json("GET", "/employers/42/vacancies/active", {"items": [{"id": "1"}]})
        fake_hh.json("GET", "/employers/42/vacancies/archived", {"items": [{"id": "2"}]})

        assert await hh_client.get_active_vacancies() == [{"id": "1"}]
        assert await hh_client.get_archived_vacancies() == [{"id": "2"}]
        assert await hh_client.get_vacancies(VacancyScope.ACTIVE) == [{"id": "1"}]

    @pytest.mark.asyncio
    async def test_pagination_collects_all_pages(self, hh_client, fake_hh):
        def pages(request):
            page = int(request.url.params.get("page", 0))
            return httpx.Response(
                200,
                json={"items": [{"id": f"n{page}"}], "page": page, "pages": 3},
            )

        fake_hh.route("GET", "/negotiations/response", pages)

        items = await hh_client.get_vacancy_responses("7")

        assert [i["id"] for i in items] == ["n0", "n1", "n2"]
        assert all(
            r.url.params["vacancy_id"] == "7" for r in fake_hh.requests
        )

    @pytest.mark.asyncio
    async def test_cover_letter_first_message(self, hh_client, fake_hh):
        fake_hh.json(
            "GET",
            "/negotiations/n1/messages",
            {"items": [{"text": "Здравствуйте!"}, {"text": "Later"}]},
        )

        text = await hh_client.get_cover_letter("https://api.hh.ru/negotiations/n1/messages")

        assert text == "Здравствуйте!"

    @pytest.mark.asyncio
    async def test_cover_letter_empty_thread(self, hh_client, fake_hh):
        fake_hh.json("GET", "/negotiations/n1/messages", {"items": []})

        assert await hh_client.get_cover_letter("https://api.hh.ru/negotiations/n1/messages") is None
