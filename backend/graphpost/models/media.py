from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator


class MediaType(str, Enum):
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"
    REELS = "REELS"
    STORIES = "STORIES"
    CAROUSEL = "CAROUSEL"


class ContainerStatus(str, Enum):
    IN_PROGRESS = "IN_PROGRESS"
    FINISHED = "FINISHED"
    ERROR = "ERROR"
    EXPIRED = "EXPIRED"
    PUBLISHED = "PUBLISHED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: str | None) -> ContainerStatus:
        try:
            return cls(value or "")
        except ValueError:
            return cls.UNKNOWN


class _StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class CarouselItem(_StrictModel):
    url: str
    media_type: MediaType = MediaType.IMAGE

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Carousel item url cannot be empty")
        return value.strip()

    @field_validator("media_type")
    @classmethod
    def validate_media_type(cls, value: MediaType) -> MediaType:
        if value not in (MediaType.IMAGE, MediaType.VIDEO):
            raise ValueError("Carousel items must be IMAGE or VIDEO")
        return value


class PublishRequest(_StrictModel):
    ig_id: str
    media_url: str | list[str | CarouselItem]
    media_type: MediaType = MediaType.IMAGE
    caption: str | None = None

    @field_validator("ig_id")
    @classmethod
    def validate_ig_id(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("ig_id cannot be empty")
        return value.strip()

    @field_validator("media_url")
    @classmethod
    def validate_media_url(cls, value: str | list[str | CarouselItem]) -> str | list[str | CarouselItem]:
        if isinstance(value, list):
            if not value:
                raise ValueError("A carousel needs at least one media url")
            return value
        if not value.strip():
            raise ValueError("media_url cannot be empty")
        return value.strip()

    @property
    def is_carousel(self) -> bool:
        return isinstance(self.media_url, list)
