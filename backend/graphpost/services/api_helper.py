from __future__ import annotations

import logging
from typing import Any

import requests

from ..errors import RemoteApiError, ResponseParseError, TransportError
from ..utils.graph_payload import extract_graph_error, extract_graph_error_codes, has_graph_error

logger = logging.getLogger("uvicorn.error")

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"


class ApiHelper:
    """Uniform GET/POST plumbing for the Instagram APIs.

    Every response is parsed as JSON and classified: transport failures,
    non-JSON success bodies and API error payloads each raise their own
    ``GraphApiError`` subclass, so callers only ever see parsed dicts.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._timeout = timeout_seconds

    def close(self) -> None:
        # Injected sessions belong to the caller.
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> ApiHelper:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @classmethod
    def default_headers(cls) -> dict[str, str]:
        return {"Content-Type": JSON_CONTENT_TYPE}

    def get(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        merged = {**self.default_headers(), **(headers or {})}
        try:
            response = self._session.get(
                path,
                params=params or {},
                headers=merged,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Graph GET %s failed before response: %s", path, exc)
            raise TransportError(f"HTTP Error: {exc}") from exc
        return self._handle_response(response)

    def post(
        self,
        path: str,
        *,
        body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        merged = {**self.default_headers(), **(headers or {})}
        payload = body or {}
        try:
            if merged.get("Content-Type") == FORM_CONTENT_TYPE:
                response = self._session.post(
                    path,
                    data=self._form_fields(payload),
                    headers=merged,
                    timeout=self._timeout,
                )
            else:
                response = self._session.post(
                    path,
                    json=payload,
                    headers=merged,
                    timeout=self._timeout,
                )
        except requests.RequestException as exc:
            logger.warning("Graph POST %s failed before response: %s", path, exc)
            raise TransportError(f"HTTP Error: {exc}") from exc
        return self._handle_response(response)

    @classmethod
    def _form_fields(cls, body: dict[str, Any]) -> dict[str, str]:
        # None values are dropped; form encoding has no null.
        return {key: str(value) for key, value in body.items() if value is not None}

    @classmethod
    def _handle_response(cls, response: requests.Response) -> dict[str, Any]:
        success = 200 <= response.status_code < 300
        try:
            payload: Any = response.json()
        except ValueError as exc:
            if success:
                raise ResponseParseError(
                    f"JSON Parse Error: {exc}",
                    status_code=response.status_code,
                ) from exc
            raw = response.text.strip()
            logger.warning("Graph API returned HTTP %s with non-JSON body", response.status_code)
            raise RemoteApiError(
                f"HTTP {response.status_code}: {raw[:600]}",
                status_code=response.status_code,
            ) from exc

        if not success or has_graph_error(payload):
            detail = extract_graph_error(payload) or f"HTTP {response.status_code}"
            code, subcode = extract_graph_error_codes(payload)
            logger.warning(
                "Graph API error status=%s code=%s subcode=%s detail=%s",
                response.status_code,
                code,
                subcode,
                detail,
            )
            raise RemoteApiError(
                f"Instagram API Error: {detail}",
                code=code,
                subcode=subcode,
                status_code=response.status_code,
            )

        if not isinstance(payload, dict):
            raise ResponseParseError(
                f"JSON Parse Error: expected an object, got {type(payload).__name__}",
                status_code=response.status_code,
            )
        return payload
