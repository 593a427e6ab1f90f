"""Authentication router for the hh.ru OAuth flow."""

import logging
import secrets
from datetime import UTC, datetime
from urllib.parse import urlencode

import httpx
from fastapi import APIRouter, HTTPException
from fastapi.responses import RedirectResponse

from hiresync.core.config import settings
from hiresync.core.storage import TokenStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

AUTHORIZE_URL = "https://hh.ru/oauth/authorize"

_state_store: set[str] = set()


@router.get("/login")
async def login():
    """Initiate OAuth flow with HH.ru."""
    state = secrets.token_urlsafe(16)
    _state_store.add(state)
    params = {
        "response_type": "code",
        "client_id": settings.hh_client_id,
        "state": state,
        "redirect_uri": settings.hh_redirect_uri,
    }
    return RedirectResponse(f"{AUTHORIZE_URL}?{urlencode(params)}")


@router.get("/callback")
async def callback(code: str, state: str):
    """Exchange the authorization code and store the issued tokens."""
    if state not in _state_store:
        raise HTTPException(status_code=400, detail="Invalid OAuth state")
    _state_store.discard(state)

    data = {
        "grant_type": "authorization_code",
        "client_id": settings.hh_client_id,
        "client_secret": settings.hh_client_secret,
        "code": code,
        "redirect_uri": settings.hh_redirect_uri,
    }
    async with httpx.AsyncClient(timeout=settings.hh_request_timeout) as client:
        try:
            response = await client.post(settings.hh_token_url, data=data)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Token exchange failed: {e.response.text}")
            raise HTTPException(
                status_code=400, detail=f"Token exchange failed: {e.response.text}"
            )
        token_data = response.json()

    await TokenStorage.save(
        {
            "access_token": token_data["access_token"],
            "refresh_token": token_data["refresh_token"],
            "expires_in": token_data["expires_in"],
            "obtained_at": datetime.now(UTC).replace(tzinfo=None),
        }
    )
    logger.info("hh.ru tokens stored")
    return {"status": "authenticated"}


@router.get("/status")
async def auth_status():
    """Report whether a usable token is stored."""
    token = await TokenStorage.get_latest()
    if token is None:
        return {"authenticated": False, "reason": "No token found"}
    return {"authenticated": True, "expired": token.is_expired()}
