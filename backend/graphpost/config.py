from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


PROJECT_ROOT = Path(__file__).resolve().parents[2]
BACKEND_ROOT = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="GRAPHPOST_",
        env_file=(PROJECT_ROOT / ".env", BACKEND_ROOT / ".env"),
        env_file_encoding="utf-8",
    )

    # Instagram Graph API
    graph_endpoint: str = "https://graph.instagram.com"
    graph_api_version: str = "v23.0"
    instagram_token_endpoint: str = "https://api.instagram.com"
    request_timeout_seconds: float = 30.0

    # OAuth app credentials
    client_id: str | None = None
    client_secret: str | None = None
    redirect_uri: str | None = None

    # Default publishing identity (routes and CLI may override per call)
    access_token: str | None = None
    ig_user_id: str | None = None

    # Container polling
    container_poll_interval_seconds: float = 30.0
    container_poll_timeout_seconds: float | None = None  # None = poll until terminal
    # 1 keeps carousel children strictly sequential
    carousel_max_parallel: int = 1

    # CORS
    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]


settings = Settings()


@dataclass(frozen=True)
class GraphClientConfig:
    """Connection values shared by every Graph API component."""

    access_token: str
    graph_endpoint: str = "https://graph.instagram.com"
    graph_api_version: str = "v23.0"
    timeout_seconds: float = 30.0

    @classmethod
    def from_settings(
        cls,
        source: Settings | None = None,
        *,
        access_token: str | None = None,
    ) -> GraphClientConfig:
        source = source or settings
        token = access_token or source.access_token
        if not token:
            raise RuntimeError(
                "Graph API access token is not configured (set GRAPHPOST_ACCESS_TOKEN)"
            )
        return cls(
            access_token=token,
            graph_endpoint=source.graph_endpoint,
            graph_api_version=source.graph_api_version,
            timeout_seconds=source.request_timeout_seconds,
        )

    @property
    def versioned_base(self) -> str:
        return f"{self.graph_endpoint.rstrip('/')}/{self.graph_api_version}"

    @property
    def unversioned_base(self) -> str:
        return self.graph_endpoint.rstrip("/")

    def with_token(self, access_token: str) -> GraphClientConfig:
        return GraphClientConfig(
            access_token=access_token,
            graph_endpoint=self.graph_endpoint,
            graph_api_version=self.graph_api_version,
            timeout_seconds=self.timeout_seconds,
        )
