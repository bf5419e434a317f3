from fastapi import APIRouter

from .auth import router as auth_router
from .media import router as media_router
from .users import router as users_router

api_router = APIRouter(prefix="/api")
api_router.include_router(auth_router)
api_router.include_router(media_router)
api_router.include_router(users_router)

__all__ = ["api_router"]
