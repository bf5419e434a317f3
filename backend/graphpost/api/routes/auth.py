import asyncio

from fastapi import APIRouter, HTTPException, Query

from ...errors import GraphApiError
from ...services import Authenticator
from .common import graph_http_exception


router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/callback")
async def oauth_callback(
    code: str = Query(..., min_length=1),
    fields: str | None = Query(default=None),
):
    """Exchange the OAuth redirect code for a long-lived token (and profile fields)."""
    try:
        authenticator = Authenticator.from_settings()
    except RuntimeError as exc:
        raise HTTPException(status_code=503, detail=str(exc))

    with authenticator:
        try:
            return await asyncio.to_thread(authenticator.get_user_info_from_code, code, fields=fields)
        except GraphApiError as exc:
            raise graph_http_exception(exc)
