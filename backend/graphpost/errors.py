from __future__ import annotations


class GraphApiError(Exception):
    """Base error for every failure raised by the client."""

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        subcode: int | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.subcode = subcode
        self.status_code = status_code


class TransportError(GraphApiError):
    """The request never produced an HTTP response."""


class ResponseParseError(GraphApiError):
    """A successful HTTP status carried a body that is not JSON."""


class RemoteApiError(GraphApiError):
    """The API answered with a non-2xx status or an error payload."""


class ContainerStatusError(GraphApiError):
    """A media container reached a terminal state other than FINISHED."""

    def __init__(self, message: str, *, container_id: str, status: str) -> None:
        super().__init__(message)
        self.container_id = container_id
        self.status = status


class ContainerExpiredError(ContainerStatusError):
    pass


class ContainerProcessingError(ContainerStatusError):
    pass


class ContainerAlreadyPublishedError(ContainerStatusError):
    pass


class ContainerUnknownStatusError(ContainerStatusError):
    pass


class ContainerPollTimeoutError(GraphApiError):
    def __init__(self, message: str, *, container_id: str, last_status: str | None = None) -> None:
        super().__init__(message)
        self.container_id = container_id
        self.last_status = last_status


class PublishCancelledError(GraphApiError):
    def __init__(self, message: str, *, container_id: str | None = None) -> None:
        super().__init__(message)
        self.container_id = container_id


__all__ = [
    "GraphApiError",
    "TransportError",
    "ResponseParseError",
    "RemoteApiError",
    "ContainerStatusError",
    "ContainerExpiredError",
    "ContainerProcessingError",
    "ContainerAlreadyPublishedError",
    "ContainerUnknownStatusError",
    "ContainerPollTimeoutError",
    "PublishCancelledError",
]
