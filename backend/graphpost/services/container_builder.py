from __future__ import annotations

from typing import Any

from ..models import MediaType

MEDIA_SOURCE_FIELDS: dict[MediaType, str] = {
    MediaType.IMAGE: "image_url",
    MediaType.VIDEO: "video_url",
    MediaType.REELS: "video_url",
    MediaType.STORIES: "video_url",
    MediaType.CAROUSEL: "children",
}


def media_source_field(media_type: MediaType | str) -> str | None:
    """Body field that carries the container source, or None for unknown types."""
    try:
        return MEDIA_SOURCE_FIELDS[MediaType(media_type)]
    except ValueError:
        return None


def build_container_body(
    *,
    access_token: str,
    media_url: str | list[str],
    media_type: MediaType | str = MediaType.IMAGE,
    caption: str | None = None,
    is_carousel_item: bool = False,
    upload_type: str | None = None,
) -> dict[str, Any]:
    # Unknown media types are forwarded without a source field; the API rejects them.
    media_type_value = media_type.value if isinstance(media_type, MediaType) else media_type
    body: dict[str, Any] = {
        "access_token": access_token,
        "media_type": media_type_value,
        "caption": caption,
    }
    field = media_source_field(media_type)
    if field is not None:
        body[field] = media_url
    if is_carousel_item:
        body["is_carousel_item"] = True
    if upload_type:
        body["upload_type"] = upload_type
    return body
