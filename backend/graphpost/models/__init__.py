from .media import CarouselItem, ContainerStatus, MediaType, PublishRequest

__all__ = ["CarouselItem", "ContainerStatus", "MediaType", "PublishRequest"]
