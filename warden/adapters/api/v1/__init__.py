"""API v1 router configuration."""

from fastapi import APIRouter

from .auth import router as auth_router
from .mailer import router as mailer_router
from .users import router as users_router

api_router = APIRouter()

api_router.include_router(auth_router)
api_router.include_router(users_router)
api_router.include_router(mailer_router)
