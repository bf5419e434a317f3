import pytest
import requests

from graphpost.errors import RemoteApiError, ResponseParseError, TransportError
from graphpost.services import api_helper
from graphpost.services.api_helper import FORM_CONTENT_TYPE, ApiHelper

from conftest import FakeResponse, FakeSession

URL = "https://api.example.com/test"


def test_get_returns_parsed_json_and_merges_headers() -> None:
    session = FakeSession(FakeResponse(200, {"status": "success", "data": "test"}))
    api = ApiHelper(session, timeout_seconds=5)

    result = api.get(URL, params={"fields": "id"}, headers={"Authorization": "Bearer token"})

    assert result == {"status": "success", "data": "test"}
    method, url, kwargs = session.calls[0]
    assert (method, url) == ("GET", URL)
    assert kwargs["params"] == {"fields": "id"}
    assert kwargs["headers"] == {"Content-Type": "application/json", "Authorization": "Bearer token"}
    assert kwargs["timeout"] == 5


def test_post_sends_json_body_by_default() -> None:
    session = FakeSession(FakeResponse(200, {"id": "1"}))
    ApiHelper(session).post(URL, body={"key1": "value1", "caption": None})

    _, _, kwargs = session.calls[0]
    assert kwargs["json"] == {"key1": "value1", "caption": None}
    assert "data" not in kwargs


def test_post_form_encodes_when_requested() -> None:
    session = FakeSession(FakeResponse(200, {"access_token": "t"}))
    ApiHelper(session).post(
        URL,
        body={"client_id": "abc", "skip": None},
        headers={"Content-Type": FORM_CONTENT_TYPE},
    )

    _, _, kwargs = session.calls[0]
    assert kwargs["data"] == {"client_id": "abc"}
    assert "json" not in kwargs
    assert kwargs["headers"]["Content-Type"] == FORM_CONTENT_TYPE


def test_transport_failure_is_wrapped() -> None:
    session = FakeSession(requests.ConnectionError("Connection failed"))

    with pytest.raises(TransportError, match="HTTP Error: Connection failed") as excinfo:
        ApiHelper(session).get(URL)
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_non_json_success_body_is_a_parse_error() -> None:
    session = FakeSession(FakeResponse(200, text="invalid json"))

    with pytest.raises(ResponseParseError, match="JSON Parse Error"):
        ApiHelper(session).get(URL)


def test_non_json_error_body_reports_status_and_text() -> None:
    session = FakeSession(FakeResponse(404, text="Not Found"))

    with pytest.raises(RemoteApiError, match="HTTP 404: Not Found") as excinfo:
        ApiHelper(session).get(URL)
    assert excinfo.value.status_code == 404


def test_graph_error_object_carries_code_and_subcode() -> None:
    body = {"error": {"message": "Invalid OAuth access token", "code": 190, "error_subcode": 463}}
    session = FakeSession(FakeResponse(400, body))

    with pytest.raises(RemoteApiError) as excinfo:
        ApiHelper(session).post(URL, body={})
    assert str(excinfo.value) == "Instagram API Error: Invalid OAuth access token"
    assert excinfo.value.code == 190
    assert excinfo.value.subcode == 463
    assert excinfo.value.status_code == 400


def test_oauth_style_error_in_success_body_is_raised() -> None:
    body = {"error": "invalid_request", "error_description": "The request is invalid"}
    session = FakeSession(FakeResponse(200, body))

    with pytest.raises(RemoteApiError, match="Instagram API Error: invalid_request - The request is invalid"):
        ApiHelper(session).get(URL)


def test_top_level_error_message_is_preferred() -> None:
    body = {"error_type": "OAuthException", "code": 400, "error_message": "Invalid platform app"}
    session = FakeSession(FakeResponse(400, body))

    with pytest.raises(RemoteApiError, match="Instagram API Error: Invalid platform app") as excinfo:
        ApiHelper(session).post(URL, body={}, headers={"Content-Type": FORM_CONTENT_TYPE})
    assert excinfo.value.code == 400


def test_non_object_json_is_rejected() -> None:
    session = FakeSession(FakeResponse(200, text="[1, 2]"))

    with pytest.raises(ResponseParseError, match="expected an object"):
        ApiHelper(session).get(URL)


def test_owned_session_is_closed_on_exit(monkeypatch) -> None:
    created: list[FakeSession] = []

    def make_session() -> FakeSession:
        session = FakeSession(FakeResponse(200, {"id": "1"}))
        created.append(session)
        return session

    monkeypatch.setattr(api_helper.requests, "Session", make_session)

    with ApiHelper() as api:
        api.get(URL)

    assert created[0].closed


def test_injected_session_is_left_open() -> None:
    session = FakeSession()

    with ApiHelper(session):
        pass

    assert not session.closed
