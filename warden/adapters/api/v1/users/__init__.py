"""User router package. ``/me`` routes are registered before the id lookup."""

from fastapi import APIRouter

from .routes import avatar as avatar_route
from .routes import lookup as lookup_route
from .routes import me as me_route

router = APIRouter(prefix="/users", tags=["users"])

router.include_router(me_route.router, prefix="/me")
router.include_router(avatar_route.router, prefix="/me/avatar")
router.include_router(lookup_route.router)

__all__ = ["router"]
