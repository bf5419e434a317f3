from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable

from ..config import GraphClientConfig
from ..errors import (
    ContainerAlreadyPublishedError,
    ContainerExpiredError,
    ContainerPollTimeoutError,
    ContainerProcessingError,
    ContainerStatusError,
    ContainerUnknownStatusError,
    PublishCancelledError,
)
from ..models import ContainerStatus
from .api_helper import ApiHelper

logger = logging.getLogger("uvicorn.error")

WaitFn = Callable[[threading.Event, float], bool]

_TERMINAL_FAILURES: dict[ContainerStatus, tuple[type[ContainerStatusError], str]] = {
    ContainerStatus.EXPIRED: (
        ContainerExpiredError,
        "Media container has expired. The container was not published within 24 hours.",
    ),
    ContainerStatus.ERROR: (
        ContainerProcessingError,
        "Media container failed to complete the publishing process.",
    ),
    ContainerStatus.PUBLISHED: (
        ContainerAlreadyPublishedError,
        "Media container has already been published.",
    ),
}


def _event_wait(cancel_event: threading.Event, seconds: float) -> bool:
    return cancel_event.wait(seconds)


class ContainerStatusPoller:
    """Polls a media container until it reaches a terminal status.

    IN_PROGRESS waits a constant interval and polls again; FINISHED returns;
    every other status raises a status-specific ``ContainerStatusError``.
    The wait is interruptible through a ``threading.Event`` and, when
    ``timeout_seconds`` is set, bounded in total duration.
    """

    def __init__(
        self,
        config: GraphClientConfig,
        api: ApiHelper,
        *,
        interval_seconds: float = 30.0,
        timeout_seconds: float | None = None,
        wait: WaitFn | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config
        self._api = api
        self.interval_seconds = interval_seconds
        self.timeout_seconds = timeout_seconds
        self._wait = wait or _event_wait
        self._clock = clock

    def fetch_status(self, container_id: str) -> dict[str, Any]:
        return self._api.get(
            f"{self._config.versioned_base}/{container_id}",
            params={"fields": "status_code", "access_token": self._config.access_token},
        )

    @classmethod
    def resolve_status(cls, payload: dict[str, Any]) -> tuple[ContainerStatus, str]:
        """Reduce a status payload to (status, raw value)."""
        raw_status = str(payload.get("status") or "")
        raw_code = str(payload.get("status_code") or "")
        for raw in (raw_status, raw_code):
            parsed = ContainerStatus.parse(raw)
            if raw and parsed is not ContainerStatus.UNKNOWN:
                return parsed, raw
        return ContainerStatus.UNKNOWN, raw_status or raw_code

    @classmethod
    def raise_for_status(cls, container_id: str, status: ContainerStatus, raw: str) -> None:
        if status in (ContainerStatus.FINISHED, ContainerStatus.IN_PROGRESS):
            return
        if status in _TERMINAL_FAILURES:
            error_cls, message = _TERMINAL_FAILURES[status]
            raise error_cls(message, container_id=container_id, status=raw)
        raise ContainerUnknownStatusError(
            f"Unknown media container status: {raw}",
            container_id=container_id,
            status=raw,
        )

    def wait_until_finished(
        self,
        container_id: str,
        *,
        cancel_event: threading.Event | None = None,
    ) -> None:
        cancel_event = cancel_event or threading.Event()
        deadline = None
        if self.timeout_seconds is not None:
            deadline = self._clock() + self.timeout_seconds
        last_status: str | None = None

        while True:
            if cancel_event.is_set():
                raise PublishCancelledError(
                    f"Polling cancelled for media container {container_id}",
                    container_id=container_id,
                )
            payload = self.fetch_status(container_id)
            status, raw = self.resolve_status(payload)
            logger.debug("Media container %s status=%s", container_id, raw)
            if status is ContainerStatus.FINISHED:
                return
            self.raise_for_status(container_id, status, raw)
            last_status = raw

            delay = self.interval_seconds
            if deadline is not None:
                remaining = deadline - self._clock()
                if remaining <= 0:
                    raise ContainerPollTimeoutError(
                        f"Media container {container_id} did not reach FINISHED "
                        f"within {self.timeout_seconds}s (last status: {last_status})",
                        container_id=container_id,
                        last_status=last_status,
                    )
                delay = min(delay, remaining)
            if self._wait(cancel_event, delay):
                raise PublishCancelledError(
                    f"Polling cancelled for media container {container_id}",
                    container_id=container_id,
                )
