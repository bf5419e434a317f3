from __future__ import annotations

from typing import Any, Sequence

from ..config import GraphClientConfig
from .api_helper import ApiHelper


class UserDetails:
    """Profile fields and token lifecycle for the account owning the token."""

    def __init__(self, config: GraphClientConfig, *, api: ApiHelper | None = None) -> None:
        self._config = config
        self._api = api or ApiHelper(timeout_seconds=config.timeout_seconds)

    def close(self) -> None:
        self._api.close()

    def __enter__(self) -> UserDetails:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def access_token(self) -> str:
        return self._config.access_token

    @classmethod
    def _fields_param(cls, fields: str | Sequence[str]) -> str:
        if isinstance(fields, str):
            return fields
        return ",".join(str(field).strip() for field in fields if str(field).strip())

    def get_user_info(self, fields: str | Sequence[str]) -> dict[str, Any]:
        return self._api.get(
            f"{self._config.versioned_base}/me",
            params={"access_token": self.access_token, "fields": self._fields_param(fields)},
        )

    def get_long_lived_access_token(self, client_secret: str) -> dict[str, Any]:
        """Exchange the current short-lived token for a 60-day token."""
        return self._api.get(
            f"{self._config.unversioned_base}/access_token",
            params={
                "access_token": self.access_token,
                "client_secret": client_secret,
                "grant_type": "ig_exchange_token",
            },
        )

    def refresh_access_token(self) -> dict[str, Any]:
        return self._api.get(
            f"{self._config.unversioned_base}/refresh_access_token",
            params={"access_token": self.access_token, "grant_type": "ig_refresh_token"},
        )
