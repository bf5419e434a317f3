from __future__ import annotations

from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
import logging
import threading
from typing import Any, Sequence

from ..config import GraphClientConfig, Settings, settings
from ..errors import RemoteApiError
from ..models import CarouselItem, MediaType, PublishRequest
from .api_helper import ApiHelper
from .container_builder import build_container_body
from .container_poller import ContainerStatusPoller

logger = logging.getLogger("uvicorn.error")

MediaSource = str | Sequence[str | CarouselItem]


class Publisher:
    """Publishes single media or carousels to an Instagram account."""

    def __init__(
        self,
        config: GraphClientConfig,
        *,
        api: ApiHelper | None = None,
        poller: ContainerStatusPoller | None = None,
        carousel_max_parallel: int = 1,
    ) -> None:
        self._config = config
        self._api = api or ApiHelper(timeout_seconds=config.timeout_seconds)
        self._poller = poller or ContainerStatusPoller(config, self._api)
        self._carousel_max_parallel = max(1, carousel_max_parallel)

    def close(self) -> None:
        self._api.close()

    def __enter__(self) -> Publisher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @classmethod
    def from_settings(
        cls,
        source: Settings | None = None,
        *,
        access_token: str | None = None,
    ) -> Publisher:
        source = source or settings
        config = GraphClientConfig.from_settings(source, access_token=access_token)
        api = ApiHelper(timeout_seconds=config.timeout_seconds)
        poller = ContainerStatusPoller(
            config,
            api,
            interval_seconds=source.container_poll_interval_seconds,
            timeout_seconds=source.container_poll_timeout_seconds,
        )
        return cls(config, api=api, poller=poller, carousel_max_parallel=source.carousel_max_parallel)

    def publish(
        self,
        ig_id: str,
        media_url: MediaSource,
        media_type: MediaType | str = MediaType.IMAGE,
        caption: str | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> dict[str, Any]:
        cancel_event = cancel_event or threading.Event()
        creation_id = self._prepare_media_container(
            ig_id=ig_id,
            media_url=media_url,
            media_type=media_type,
            caption=caption,
            cancel_event=cancel_event,
        )
        response = self._api.post(
            f"{self._config.versioned_base}/{ig_id}/media_publish",
            body={"access_token": self._config.access_token, "creation_id": creation_id},
        )
        logger.info("Published media container %s for %s: %s", creation_id, ig_id, response.get("id"))
        return response

    def publish_request(
        self,
        request: PublishRequest,
        *,
        cancel_event: threading.Event | None = None,
    ) -> dict[str, Any]:
        return self.publish(
            request.ig_id,
            request.media_url,
            request.media_type,
            request.caption,
            cancel_event=cancel_event,
        )

    def _prepare_media_container(
        self,
        *,
        ig_id: str,
        media_url: MediaSource,
        media_type: MediaType | str,
        caption: str | None,
        cancel_event: threading.Event,
    ) -> str:
        if isinstance(media_url, str):
            return self.create_media_container(
                ig_id=ig_id,
                media_url=media_url,
                media_type=media_type,
                caption=caption,
                cancel_event=cancel_event,
            )
        return self._prepare_carousel(
            ig_id=ig_id,
            items=[self._as_carousel_item(item) for item in media_url],
            media_type=media_type,
            caption=caption,
            cancel_event=cancel_event,
        )

    @classmethod
    def _as_carousel_item(cls, item: str | CarouselItem) -> CarouselItem:
        if isinstance(item, CarouselItem):
            return item
        return CarouselItem(url=item)

    def _prepare_carousel(
        self,
        *,
        ig_id: str,
        items: list[CarouselItem],
        media_type: MediaType | str,
        caption: str | None,
        cancel_event: threading.Event,
    ) -> str:
        if not items:
            raise ValueError("A carousel needs at least one media url")
        if str(getattr(media_type, "value", media_type)) != MediaType.CAROUSEL.value:
            logger.warning(
                "Carousel requested with media_type=%s; parent container uses CAROUSEL",
                getattr(media_type, "value", media_type),
            )

        def _create_child(item: CarouselItem) -> str:
            return self.create_media_container(
                ig_id=ig_id,
                media_url=item.url,
                media_type=item.media_type,
                caption=caption,
                is_carousel_item=True,
                cancel_event=cancel_event,
            )

        max_workers = min(self._carousel_max_parallel, len(items))
        if max_workers <= 1:
            children_ids = [_create_child(item) for item in items]
        else:
            children_ids = self._create_children_parallel(_create_child, items, max_workers, cancel_event)

        return self.create_media_container(
            ig_id=ig_id,
            media_url=children_ids,
            media_type=MediaType.CAROUSEL,
            caption=caption,
            cancel_event=cancel_event,
        )

    @classmethod
    def _create_children_parallel(
        cls,
        create_child,
        items: list[CarouselItem],
        max_workers: int,
        cancel_event: threading.Event,
    ) -> list[str]:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(create_child, item) for item in items]
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)
            failed = [future for future in futures if future in done and future.exception() is not None]
            if failed:
                # Stop sibling polls; they raise PublishCancelledError on their next wait.
                cancel_event.set()
                for future in pending:
                    future.cancel()
                raise failed[0].exception()
            return [future.result() for future in futures]

    def create_media_container(
        self,
        *,
        ig_id: str,
        media_url: str | list[str],
        media_type: MediaType | str = MediaType.IMAGE,
        caption: str | None = None,
        is_carousel_item: bool = False,
        upload_type: str | None = None,
        cancel_event: threading.Event | None = None,
    ) -> str:
        body = build_container_body(
            access_token=self._config.access_token,
            media_url=media_url,
            media_type=media_type,
            caption=caption,
            is_carousel_item=is_carousel_item,
            upload_type=upload_type,
        )
        payload = self._api.post(f"{self._config.versioned_base}/{ig_id}/media", body=body)
        container_id = str(payload.get("id") or "").strip()
        if not container_id:
            raise RemoteApiError(f"Instagram media container creation returned no id: {payload}")
        logger.info(
            "Created media container %s (media_type=%s, carousel_item=%s)",
            container_id,
            body["media_type"],
            is_carousel_item,
        )

        self._poller.wait_until_finished(container_id, cancel_event=cancel_event)
        logger.info("Media container %s finished processing", container_id)
        return container_id
