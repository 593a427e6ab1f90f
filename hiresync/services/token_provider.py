"""Bearer credential providers for the hh.ru API."""

import logging
from datetime import UTC, datetime
from typing import Protocol

import httpx

from hiresync.core.config import settings
from hiresync.core.exceptions import TokenUnavailableError
from hiresync.core.storage import TokenStorage

logger = logging.getLogger(__name__)


class TokenProvider(Protocol):
    """Supplies the bearer token and can reissue it on demand."""

    async def current_token(self) -> str: ...

    async def reissue(self) -> bool: ...


class StaticTokenProvider:
    """Fixed token from configuration. Cannot be reissued."""

    def __init__(self, token: str):
        self._token = token

    async def current_token(self) -> str:
        return self._token

    async def reissue(self) -> bool:
        logger.warning("Static hh.ru token cannot be reissued")
        return False


class StoredTokenProvider:
    """Token kept in the database, refreshed through the OAuth refresh grant."""

    def __init__(self, session_factory=None, transport: httpx.AsyncBaseTransport | None = None):
        self._session_factory = session_factory
        self._transport = transport

    async def current_token(self) -> str:
        token = await TokenStorage.get_latest(self._session_factory)
        if token is None:
            raise TokenUnavailableError(
                "No hh.ru token stored. Please authenticate via /auth/login"
            )
        return token.access_token

    async def reissue(self) -> bool:
        token = await TokenStorage.get_latest(self._session_factory)
        if token is None:
            logger.error("Cannot reissue hh.ru tokens: nothing stored")
            return False

        data = {
            "grant_type": "refresh_token",
            "refresh_token": token.refresh_token,
            "client_id": settings.hh_client_id,
            "client_secret": settings.hh_client_secret,
        }

        async with httpx.AsyncClient(
            timeout=settings.hh_request_timeout, transport=self._transport
        ) as client:
            try:
                response = await client.post(settings.hh_token_url, data=data)
                response.raise_for_status()
                token_data = response.json()
            except httpx.HTTPStatusError as e:
                logger.error(f"Token refresh failed: {e.response.text}")
                return False
            except httpx.HTTPError as e:
                logger.error(f"Token refresh request failed: {e!s}")
                return False

        await TokenStorage.save(
            {
                "access_token": token_data["access_token"],
                "refresh_token": token_data["refresh_token"],
                "expires_in": token_data["expires_in"],
                "obtained_at": datetime.now(UTC).replace(tzinfo=None),
            },
            self._session_factory,
        )
        logger.info("hh.ru tokens reissued")
        return True


def get_token_provider(session_factory=None) -> TokenProvider:
    """Pick the provider for this deployment."""
    if settings.hh_access_token:
        return StaticTokenProvider(settings.hh_access_token)
    return StoredTokenProvider(session_factory)
