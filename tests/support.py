"""Fakes and sample payloads shared by the test suite."""

from collections.abc import Callable

import httpx

API = "https://api.hh.ru"
REFUSAL_ACTION = "Отказ"
REFUSAL_TEMPLATE = "Шаблон быстрого отказа на отклик"


class FakeTokenProvider:
    """Token provider that counts reissues."""

    def __init__(self, token: str = "token-1", reissue_ok: bool = True):
        self.token = token
        self.reissue_ok = reissue_ok
        self.reissue_calls = 0

    async def current_token(self) -> str:
        return self.token

    async def reissue(self) -> bool:
        self.reissue_calls += 1
        if self.reissue_ok:
            self.token = f"token-{self.reissue_calls + 1}"
        return self.reissue_ok


class FakeHH:
    """Scripted hh.ru API served through httpx.MockTransport."""

    def __init__(self):
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def route(self, method: str, path: str, handler):
        self.routes[(method, path)] = handler

    def json(self, method: str, path: str, *payloads, status_code: int = 200):
        """Serve payloads in order; the last one repeats."""
        queue = list(payloads)

        def handler(request):
            payload = queue.pop(0) if len(queue) > 1 else queue[0]
            if isinstance(payload, httpx.Response):
                return httpx.Response(
                    payload.status_code, headers=payload.headers, content=payload.content
                )
            return httpx.Response(status_code, json=payload)

        self.route(method, path, handler)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(
                404, json={"errors": [{"type": "not_found", "value": request.url.path}]}
            )
        return handler(request)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r for r in self.requests if r.method == method and r.url.path == path
        ]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def token_expired_response() -> httpx.Response:
    return httpx.Response(
        403,
        json={
            "errors": [{"type": "oauth", "value": "token_expired"}],
            "request_id": "abc",
        },
    )


def make_vacancy(vacancy_id: str, name: str = "Python Developer") -> dict:
    return {
        "id": vacancy_id,
        "name": name,
        "area": {"id": "1", "name": "Москва"},
        "alternate_url": f"https://hh.ru/vacancy/{vacancy_id}",
    }


def make_negotiation(
    negotiation_id: str, resume_id: str | None, with_refusal: bool = True
) -> dict:
    actions = [{"id": "invitation", "name": "Приглашение", "templates": []}]
    if with_refusal:
        actions.append(
            {
                "id": "discard_by_employer",
                "name": REFUSAL_ACTION,
                "templates": [
                    {
                        "name": REFUSAL_TEMPLATE,
                        "url": f"{API}/message_templates/discard?topic_id={negotiation_id}",
                    }
                ],
            }
        )
    return {
        "id": negotiation_id,
        "resume": {"id": resume_id, "url": f"{API}/resumes/{resume_id}"}
        if resume_id
        else None,
        "messages_url": f"{API}/negotiations/{negotiation_id}/messages",
        "actions": actions,
    }


def make_resume(resume_id: str, first_name: str = "Иван") -> dict:
    return {
        "id": resume_id,
        "first_name": first_name,
        "last_name": "Петров",
        "middle_name": "Сергеевич",
        "birth_date": "1990-05-01",
        "area": {"id": "2", "name": "Санкт-Петербург"},
        "alternate_url": f"https://hh.ru/resume/{resume_id}",
        "photo": {"medium": f"https://img.hh.ru/{resume_id}.jpg"},
        "salary": {"amount": 250000, "currency": "RUR"},
        "experience": [{"company": "Acme", "position": "Developer"}],
        "skills": "Python, SQL",
        "contact": [
            {"type": {"id": "cell"}, "value": "+7 900 000-00-00"},
            {"type": {"id": "email"}, "value": f"{resume_id}@example.com"},
        ],
    }

