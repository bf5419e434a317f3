import asyncio

from fastapi import APIRouter, HTTPException

from ...errors import GraphApiError
from ...models import PublishRequest
from ...services import Publisher
from .common import graph_http_exception


router = APIRouter(prefix="/media", tags=["media"])


class PublishMediaRequest(PublishRequest):
    access_token: str | None = None


@router.post("/publish")
async def publish_media(request: PublishMediaRequest):
    """Create, poll and publish the requested media; blocks until published."""
    try:
        publisher = Publisher.from_settings(access_token=request.access_token)
    except RuntimeError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    with publisher:
        try:
            return await asyncio.to_thread(publisher.publish_request, request)
        except GraphApiError as exc:
            raise graph_http_exception(exc)
