"""Instagram Graph API client: OAuth login, profile fields and media publishing."""

from .config import GraphClientConfig, Settings, settings
from .errors import (
    ContainerAlreadyPublishedError,
    ContainerExpiredError,
    ContainerPollTimeoutError,
    ContainerProcessingError,
    ContainerStatusError,
    ContainerUnknownStatusError,
    GraphApiError,
    PublishCancelledError,
    RemoteApiError,
    ResponseParseError,
    TransportError,
)
from .models import CarouselItem, ContainerStatus, MediaType, PublishRequest
from .services import (
    ApiHelper,
    Authenticator,
    ContainerStatusPoller,
    Publisher,
    UserDetails,
    build_container_body,
)

__version__ = "0.1.0"

__all__ = [
    "GraphClientConfig", "Settings", "settings",
    "GraphApiError", "TransportError", "ResponseParseError", "RemoteApiError",
    "ContainerStatusError", "ContainerExpiredError", "ContainerProcessingError",
    "ContainerAlreadyPublishedError", "ContainerUnknownStatusError",
    "ContainerPollTimeoutError", "PublishCancelledError",
    "CarouselItem", "ContainerStatus", "MediaType", "PublishRequest",
    "ApiHelper", "Authenticator", "ContainerStatusPoller", "Publisher", "UserDetails",
    "build_container_body",
]
