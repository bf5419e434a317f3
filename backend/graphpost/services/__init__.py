from .api_helper import ApiHelper
from .authenticator import Authenticator
from .container_builder import build_container_body, media_source_field
from .container_poller import ContainerStatusPoller
from .publisher import Publisher
from .user_details import UserDetails

__all__ = [
    "ApiHelper",
    "Authenticator",
    "build_container_body", "media_source_field",
    "ContainerStatusPoller",
    "Publisher",
    "UserDetails",
]
