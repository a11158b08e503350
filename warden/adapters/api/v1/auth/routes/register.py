import structlog
from fastapi import APIRouter, status

from warden.adapters.api.v1.schemas import AuthResponse, RegisterRequest
from warden.core.dependencies.services import AuthServiceDep

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="Creates the account, emails a verification link and opens a session.",
)
async def register_user(payload: RegisterRequest, auth_service: AuthServiceDep):
    result = await auth_service.register(payload.to_draft())
    logger.info("User registered via API", user_id=str(result.user.id))
    return AuthResponse.from_result(result)
