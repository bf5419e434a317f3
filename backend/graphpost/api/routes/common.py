from __future__ import annotations

from fastapi import HTTPException

from ...errors import (
    ContainerPollTimeoutError,
    ContainerStatusError,
    GraphApiError,
    PublishCancelledError,
)


def graph_http_exception(exc: GraphApiError) -> HTTPException:
    """Map a client error onto the HTTP status the API surface returns."""
    if isinstance(exc, ContainerStatusError):
        return HTTPException(
            status_code=409,
            detail={"message": str(exc), "container_id": exc.container_id, "status": exc.status},
        )
    if isinstance(exc, (ContainerPollTimeoutError, PublishCancelledError)):
        return HTTPException(status_code=504, detail=str(exc))
    return HTTPException(status_code=502, detail=str(exc))
