from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from warden.core.dependencies.services import TokenServiceDep, UserServiceDep
from warden.core.exceptions import ForbiddenError, UnauthorizedError, UserNotFoundError
from warden.domain.entities.user import Role, User
from warden.domain.value_objects.tokens import AccessTokenClaims

__all__ = [
    "get_bearer_token",
    "get_access_claims",
    "get_current_user",
    "get_current_admin_user",
    "BearerToken",
    "CurrentClaims",
    "CurrentUser",
    "AdminUser",
]


# ---------------------------------------------------------------------------
# Type-annotated dependency shortcuts
# ---------------------------------------------------------------------------


_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


def get_bearer_token(token: Annotated[Optional[str], Depends(_oauth2_scheme)]) -> str:
    if not token:
        raise UnauthorizedError()
    return token


BearerToken = Annotated[str, Depends(get_bearer_token)]


# ---------------------------------------------------------------------------
# Public dependencies
# ---------------------------------------------------------------------------


async def get_access_claims(token: BearerToken, token_service: TokenServiceDep) -> AccessTokenClaims:
    """Claims of a live access token; any failure is ``InvalidTokenError``."""
    return await token_service.verify_access_token(token)


CurrentClaims = Annotated[AccessTokenClaims, Depends(get_access_claims)]


async def get_current_user(claims: CurrentClaims, user_service: UserServiceDep) -> User:
    """Return the authenticated :class:`~warden.domain.entities.user.User`.

    Performs **no** role checks; see :func:`get_current_admin_user`.
    """
    try:
        return await user_service.get_by_id(claims.user_id)
    except UserNotFoundError as exc:
        raise UnauthorizedError() from exc


CurrentUser = Annotated[User, Depends(get_current_user)]


def get_current_admin_user(current_user: CurrentUser) -> User:
    """Ensure the authenticated user has the *ADMIN* role."""
    if current_user.role != Role.ADMIN:
        raise ForbiddenError()
    return current_user


AdminUser = Annotated[User, Depends(get_current_admin_user)]
