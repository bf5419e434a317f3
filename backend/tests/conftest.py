from __future__ import annotations

import json
import threading
from collections import defaultdict
from typing import Any

import pytest

from graphpost.config import GraphClientConfig
from graphpost.services import ContainerStatusPoller, Publisher

BASE = "https://graph.instagram.com/v23.0"


class FakeResponse:
    """Just enough of requests.Response for ApiHelper."""

    def __init__(self, status_code: int = 200, body: Any = None, text: str | None = None) -> None:
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else json.dumps(body)

    def json(self) -> Any:
        if self._body is None:
            return json.loads(self.text)
        return self._body


class FakeSession:
    def __init__(self, *responses: FakeResponse | Exception) -> None:
        self.responses = list(responses)
        self.calls: list[tuple[str, str, dict[str, Any]]] = []
        self.closed = False

    def _next(self, method: str, url: str, kwargs: dict[str, Any]) -> FakeResponse:
        self.calls.append((method, url, kwargs))
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._next("GET", url, kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._next("POST", url, kwargs)

    def close(self) -> None:
        self.closed = True


class FakeGraphApi:
    """Scripted stand-in for ApiHelper covering the publishing endpoints.

    Container ids are issued as c1, c2, ... in creation order. Status
    sequences are consumed per container; an exhausted or missing sequence
    reports FINISHED.
    """

    def __init__(self, statuses: dict[str, list[str]] | None = None) -> None:
        self.statuses: dict[str, list[str]] = defaultdict(list, statuses or {})
        self.calls: list[tuple[str, str, dict[str, Any]]] = []
        self.publish_response: dict[str, Any] = {"id": "17900000000000001"}
        self._lock = threading.Lock()
        self._next_id = 0
        self.closed = False

    def post(self, path: str, *, body: dict[str, Any] | None = None, headers: dict[str, str] | None = None):
        with self._lock:
            self.calls.append(("POST", path, dict(body or {})))
            if path.endswith("/media_publish"):
                return self.publish_response
            self._next_id += 1
            return {"id": f"c{self._next_id}"}

    def get(self, path: str, *, params: dict[str, Any] | None = None, headers: dict[str, str] | None = None):
        container_id = path.rsplit("/", 1)[-1]
        with self._lock:
            self.calls.append(("GET", path, dict(params or {})))
            queue = self.statuses[container_id]
            status = queue.pop(0) if queue else "FINISHED"
        return {"status": status, "id": container_id}

    def close(self) -> None:
        self.closed = True

    def creations(self) -> list[dict[str, Any]]:
        return [body for method, path, body in self.calls if method == "POST" and path.endswith("/media")]

    def status_queries(self) -> list[str]:
        return [path.rsplit("/", 1)[-1] for method, path, _ in self.calls if method == "GET"]

    def publishes(self) -> list[dict[str, Any]]:
        return [body for method, path, body in self.calls if path.endswith("/media_publish")]


class RecordingWait:
    def __init__(self, cancel_after: int | None = None) -> None:
        self.delays: list[float] = []
        self.cancel_after = cancel_after

    def __call__(self, cancel_event: threading.Event, seconds: float) -> bool:
        self.delays.append(seconds)
        if self.cancel_after is not None and len(self.delays) >= self.cancel_after:
            cancel_event.set()
        return cancel_event.is_set()


@pytest.fixture()
def graph_config() -> GraphClientConfig:
    return GraphClientConfig(access_token="test-token")


@pytest.fixture()
def fake_api() -> FakeGraphApi:
    return FakeGraphApi()


@pytest.fixture()
def recording_wait() -> RecordingWait:
    return RecordingWait()


@pytest.fixture()
def publisher(graph_config: GraphClientConfig, fake_api: FakeGraphApi, recording_wait: RecordingWait) -> Publisher:
    poller = ContainerStatusPoller(graph_config, fake_api, wait=recording_wait)
    return Publisher(graph_config, api=fake_api, poller=poller)
