import asyncio

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from ...config import GraphClientConfig, settings
from ...errors import GraphApiError
from ...services import UserDetails
from .common import graph_http_exception


router = APIRouter(prefix="/users", tags=["users"])


class TokenRequest(BaseModel):
    access_token: str | None = None


def _user_details(access_token: str | None) -> UserDetails:
    try:
        return UserDetails(GraphClientConfig.from_settings(access_token=access_token))
    except RuntimeError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.get("/me")
async def get_me(
    fields: str = Query(default="id,username"),
    access_token: str | None = Query(default=None),
):
    """Return profile fields for the token owner."""
    with _user_details(access_token) as client:
        try:
            return await asyncio.to_thread(client.get_user_info, fields)
        except GraphApiError as exc:
            raise graph_http_exception(exc)


@router.post("/me/long-lived-token")
async def exchange_long_lived_token(request: TokenRequest):
    """Upgrade a short-lived token to a long-lived one."""
    if not settings.client_secret:
        raise HTTPException(status_code=503, detail="GRAPHPOST_CLIENT_SECRET is not configured")
    with _user_details(request.access_token) as client:
        try:
            return await asyncio.to_thread(client.get_long_lived_access_token, settings.client_secret)
        except GraphApiError as exc:
            raise graph_http_exception(exc)


@router.post("/me/refresh-token")
async def refresh_token(request: TokenRequest):
    """Refresh a long-lived token before it expires."""
    with _user_details(request.access_token) as client:
        try:
            return await asyncio.to_thread(client.refresh_access_token)
        except GraphApiError as exc:
            raise graph_http_exception(exc)
