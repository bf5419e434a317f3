from __future__ import annotations

import json
from typing import Any

from graphpost import cli
from graphpost.config import settings
from graphpost.errors import ContainerUnknownStatusError


class FakePublisher:
    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.closed = False

    def __enter__(self) -> FakePublisher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.closed = True

    def publish(self, ig_id, media_url, media_type, caption):
        self.calls.append((ig_id, media_url, media_type, caption))
        return {"id": "m1"}


def _install(monkeypatch, publisher: FakePublisher) -> dict[str, Any]:
    seen: dict[str, Any] = {}

    def from_settings(source=None, *, access_token=None):
        seen["source"] = source
        seen["access_token"] = access_token
        return publisher

    monkeypatch.setattr(cli.Publisher, "from_settings", from_settings)
    return seen


def test_publish_single_url(monkeypatch, capsys) -> None:
    publisher = FakePublisher()
    _install(monkeypatch, publisher)

    code = cli.main(["publish", "http://x/a.jpg", "--ig-id", "u1", "--caption", "hi"])

    assert code == 0
    assert publisher.calls == [("u1", "http://x/a.jpg", "IMAGE", "hi")]
    assert publisher.closed
    assert json.loads(capsys.readouterr().out) == {"id": "m1"}


def test_publish_several_urls_is_a_carousel(monkeypatch) -> None:
    publisher = FakePublisher()
    seen = _install(monkeypatch, publisher)

    cli.main(["publish", "a", "b", "--ig-id", "u1", "--access-token", "tok", "--poll-interval", "2"])

    assert publisher.calls == [("u1", ["a", "b"], "CAROUSEL", None)]
    assert seen["access_token"] == "tok"
    assert seen["source"].container_poll_interval_seconds == 2


def test_publish_failure_exits_non_zero(monkeypatch, capsys) -> None:
    class FailingPublisher(FakePublisher):
        def publish(self, ig_id, media_url, media_type, caption):
            raise ContainerUnknownStatusError(
                "Unknown media container status: LOST", container_id="c1", status="LOST"
            )

    _install(monkeypatch, FailingPublisher())

    code = cli.main(["publish", "http://x/a.jpg", "--ig-id", "u1"])

    assert code == 1
    assert "Unknown media container status: LOST" in capsys.readouterr().err


def test_me_prints_profile(monkeypatch, capsys) -> None:
    monkeypatch.setattr(cli.UserDetails, "get_user_info", lambda self, fields: {"id": "1", "fields": fields})

    code = cli.main(["me", "--access-token", "tok", "--fields", "id"])

    assert code == 0
    assert json.loads(capsys.readouterr().out) == {"id": "1", "fields": "id"}


def test_refresh_without_token_is_a_configuration_error(monkeypatch, capsys) -> None:
    monkeypatch.setattr(settings, "access_token", None)

    code = cli.main(["refresh"])

    assert code == 2
    assert "GRAPHPOST_ACCESS_TOKEN" in capsys.readouterr().err


def test_publish_without_ig_id_is_a_configuration_error(monkeypatch, capsys) -> None:
    publisher = FakePublisher()
    _install(monkeypatch, publisher)
    monkeypatch.setattr(settings, "ig_user_id", None)

    code = cli.main(["publish", "http://x/a.jpg"])

    assert code == 2
    assert "GRAPHPOST_IG_USER_ID" in capsys.readouterr().err
    assert publisher.calls == []
