"""Login endpoint.

Thin layer: the auth service owns every decision, including the timing
equalization between unknown users and wrong passwords.
"""

import structlog
from fastapi import APIRouter, Request, status

from warden.adapters.api.v1.schemas import AuthResponse, LoginRequest
from warden.core.dependencies.services import AuthServiceDep
from warden.core.rate_limiting.ratelimiter import client_identifier

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="Authenticate a user",
)
async def login_user(request: Request, payload: LoginRequest, auth_service: AuthServiceDep):
    request_logger = logger.bind(endpoint="login", client_ip=client_identifier(request))
    request_logger.info("Login attempt", username_length=len(payload.username))

    result = await auth_service.login(payload.username, payload.password)

    request_logger.info("Login succeeded", user_id=str(result.user.id))
    return AuthResponse.from_result(result)
