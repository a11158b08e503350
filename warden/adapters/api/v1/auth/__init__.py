"""Authentication router package: login, registration, logout, password reset."""

from fastapi import APIRouter

from .routes import login as login_route
from .routes import logout as logout_route
from .routes import password_reset as password_reset_route
from .routes import register as register_route

router = APIRouter(prefix="/auth", tags=["auth"])

router.include_router(login_route.router, prefix="/login")
router.include_router(register_route.router, prefix="/register")
router.include_router(logout_route.router, prefix="/logout")
router.include_router(password_reset_route.router, prefix="/password-reset")

__all__ = ["router"]
