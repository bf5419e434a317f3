from __future__ import annotations

import logging
from typing import Any, Sequence

from ..config import GraphClientConfig, Settings, settings
from ..errors import RemoteApiError
from .api_helper import FORM_CONTENT_TYPE, ApiHelper
from .user_details import UserDetails

logger = logging.getLogger("uvicorn.error")

INSTAGRAM_TOKEN_ENDPOINT = "https://api.instagram.com"


class Authenticator:
    """Instagram login: authorization code -> long-lived token (+ profile)."""

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        api: ApiHelper | None = None,
        token_endpoint: str = INSTAGRAM_TOKEN_ENDPOINT,
        graph_config: GraphClientConfig | None = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self._api = api or ApiHelper()
        self._token_endpoint = token_endpoint.rstrip("/")
        # Only endpoint/version/timeout are used; the token is replaced per exchange.
        self._graph_config = graph_config or GraphClientConfig(access_token="")

    def close(self) -> None:
        self._api.close()

    def __enter__(self) -> Authenticator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @classmethod
    def from_settings(cls, source: Settings | None = None, *, api: ApiHelper | None = None) -> Authenticator:
        source = source or settings
        if not source.client_id or not source.client_secret or not source.redirect_uri:
            raise RuntimeError(
                "Instagram login requires GRAPHPOST_CLIENT_ID, GRAPHPOST_CLIENT_SECRET "
                "and GRAPHPOST_REDIRECT_URI"
            )
        return cls(
            client_id=source.client_id,
            client_secret=source.client_secret,
            redirect_uri=source.redirect_uri,
            api=api or ApiHelper(timeout_seconds=source.request_timeout_seconds),
            token_endpoint=source.instagram_token_endpoint,
            graph_config=GraphClientConfig(
                access_token="",
                graph_endpoint=source.graph_endpoint,
                graph_api_version=source.graph_api_version,
                timeout_seconds=source.request_timeout_seconds,
            ),
        )

    def token_request_params(self, code: str) -> dict[str, str]:
        return {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "grant_type": "authorization_code",
            "redirect_uri": self.redirect_uri,
            "code": code,
        }

    def exchange_code_for_token(self, code: str) -> dict[str, Any]:
        return self._api.post(
            f"{self._token_endpoint}/oauth/access_token",
            body=self.token_request_params(code),
            headers={"Content-Type": FORM_CONTENT_TYPE},
        )

    def user_details_client(self, access_token: str) -> UserDetails:
        return UserDetails(self._graph_config.with_token(access_token), api=self._api)

    def get_user_info_from_code(
        self,
        code: str,
        *,
        fields: str | Sequence[str] | None = None,
    ) -> dict[str, Any]:
        short_lived = self.exchange_code_for_token(code)
        short_lived_token = str(short_lived.get("access_token") or "")
        if not short_lived_token:
            raise RemoteApiError(f"Instagram code exchange returned no access_token: {short_lived}")
        logger.info("Exchanged authorization code for user %s", short_lived.get("user_id"))

        client = self.user_details_client(short_lived_token)
        long_lived = client.get_long_lived_access_token(client_secret=self.client_secret)
        long_lived_token = str(long_lived.get("access_token") or "")
        if not long_lived_token:
            raise RemoteApiError(f"Instagram long-lived exchange returned no access_token: {long_lived}")

        result: dict[str, Any] = {"access_token": long_lived_token}
        if fields:
            result["user_details"] = client.get_user_info(fields=fields)
        return result
