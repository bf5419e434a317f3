import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .api import api_router


# Reuse uvicorn's logger so client diagnostics land in the server logs.
logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the Graph API target once on startup."""
    logger.info(
        "Instagram Graph client ready: endpoint=%s version=%s token_configured=%s poll_interval=%ss",
        settings.graph_endpoint,
        settings.graph_api_version,
        bool(settings.access_token),
        settings.container_poll_interval_seconds,
    )
    yield


app = FastAPI(
    title="graphpost",
    description="Instagram Graph API login, profile and media publishing service",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
