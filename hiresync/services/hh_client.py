import logging
from typing import Any

import httpx

from hiresync.core.config import settings
from hiresync.core.exceptions import RemoteRequestError
from hiresync.core.retry import retry_async
from hiresync.schemas.sync import VacancyScope
from hiresync.services.token_provider import TokenProvider, get_token_provider

logger = logging.getLogger(__name__)


def _is_token_expired(error: Exception) -> bool:
    return isinstance(error, RemoteRequestError) and error.is_token_expired


class HHClient:
    """HeadHunter employer API client."""

    MAX_TOKEN_ATTEMPTS = 3

    def __init__(
        self,
        token_provider: TokenProvider | None = None,
        employer_id: str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.token_provider = token_provider or get_token_provider()
        self.employer_id = employer_id or settings.hh_employer_id
        self.api_base = (base_url or settings.hh_api_base).rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.api_base,
            timeout=httpx.Timeout(settings.hh_request_timeout),
            limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            headers={
                "Content-Type": "application/json",
                "User-Agent": settings.hh_user_agent,
            },
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def _auth_headers(self) -> dict[str, str]:
        token = await self.token_provider.current_token()
        return {"Authorization": f"Bearer {token}"}

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    @classmethod
    def _raise_for_status(cls, response: httpx.Response, payload: Any) -> None:
        if response.is_success:
            return
        errors = payload.get("errors") if isinstance(payload, dict) else None
        raise RemoteRequestError(response.status_code, errors)

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        headers = kwargs.pop("headers", {})
        headers.update(await self._auth_headers())
        try:
            return await self.client.request(method, url, headers=headers, **kwargs)
        except httpx.TransportError as e:
            logger.error(f"Network error on {method} {url}: {e!s}")
            raise RemoteRequestError(
                503, [{"type": "network", "value": type(e).__name__}]
            ) from e

    async def _get_once(self, url: str, params: dict | None) -> Any:
        response = await self._send("GET", url, params=params)
        payload = self._decode(response)
        self._raise_for_status(response, payload)
        if payload is None:
            raise RemoteRequestError(
                response.status_code, [{"type": "bad_response", "value": "invalid_json"}]
            )
        return payload

    async def _reissue_tokens(self, error: Exception, attempt: int) -> bool:
        logger.info(f"Tokens expired. Trying to reissue... ({attempt}/{self.MAX_TOKEN_ATTEMPTS})")
        return await self.token_provider.reissue()

    async def get(self, url: str, params: dict | None = None) -> Any:
        """GET a URL and return the decoded JSON body.

        A 403 ``oauth: token_expired`` answer triggers a token reissue and a
        repeat of the same request, at most twice per call.
        """

        async def attempt() -> Any:
            return await self._get_once(url, params)

        result = await retry_async(
            attempt,
            attempts=self.MAX_TOKEN_ATTEMPTS,
            retry_on=_is_token_expired,
            before_retry=self._reissue_tokens,
        )
        return result.unwrap()

    async def post(self, url: str, data: dict | None = None) -> httpx.Response:
        """POST a form (or empty body) and return the raw response.

        Failures raise ``RemoteRequestError`` and are never retried.
        """
        headers = {}
        if data is not None:
            headers["Content-Type"] = "application/x-www-form-urlencoded"

        response = await self._send("POST", url, data=data, headers=headers)
        self._raise_for_status(response, self._decode(response))
        return response

    async def get_items(self, url: str, params: dict | None = None) -> list[dict]:
        """Collect ``items`` across all pages of an hh.ru list endpoint."""
        items: list[dict] = []
        page = 0

        while True:
            page_params = dict(params or {})
            if page:
                page_params["page"] = page

            response = await self.get(url, params=page_params or None)
            items.extend(response.get("items") or [])

            pages = response.get("pages") or 1
            if page >= pages - 1:
                break

            page += 1
            if page >= settings.hh_max_pages:
                logger.warning(f"Reached page limit while listing {url}")
                break

        return items

    # GET /employers/{employer_id}/vacancies/{active|archived}
    async def get_vacancies(self, scope: VacancyScope) -> list[dict]:
        scope = VacancyScope(scope)
        return await self.get_items(
            f"/employers/{self.employer_id}/vacancies/{scope.value}"
        )

    async def get_active_vacancies(self) -> list[dict]:
        return await self.get_vacancies(VacancyScope.ACTIVE)

    async def get_archived_vacancies(self) -> list[dict]:
        return await self.get_vacancies(VacancyScope.ARCHIVED)

    # GET /negotiations/response?vacancy_id={vacancy_id}
    async def get_vacancy_responses(self, vacancy_id: str) -> list[dict]:
        return await self.get_items(
            "/negotiations/response", params={"vacancy_id": vacancy_id}
        )

    async def get_resume(self, resume_url: str) -> dict:
        return await self.get(resume_url)

    async def get_cover_letter(self, messages_url: str) -> str | None:
        """Text of the first message in the negotiation thread."""
        response = await self.get(messages_url)
        items = response.get("items") or []
        if not items:
            return None
        return items[0].get("text")

    async def get_refusal_template(self, refusal_url: str) -> dict:
        return await self.get(refusal_url)

    async def discard_response(self, response_id: str, message: str) -> httpx.Response:
        """Refuse a candidate's response with the given message."""
        return await self.post(
            f"/negotiations/discard_by_employer/{response_id}",
            data={"message": message},
        )


async def get_hh_client():
    """FastAPI dependency for HH client with proper cleanup."""
    client = HHClient()
    try:
        yield client
    finally:
        await client.close()
