"""Password reset endpoints.

``POST`` always answers ``202`` so the response does not reveal whether the
address belongs to an account.
"""

from fastapi import APIRouter, Depends, Response, status

from warden.adapters.api.v1.schemas import MessageOut, PasswordChangeRequest, PasswordResetRequest
from warden.core.dependencies.rate_limit import mail_rate_limit
from warden.core.dependencies.services import AuthServiceDep

router = APIRouter()


@router.post(
    "",
    response_model=MessageOut,
    status_code=status.HTTP_202_ACCEPTED,
    dependencies=[Depends(mail_rate_limit)],
    summary="Email a password reset link",
)
async def request_password_reset(payload: PasswordResetRequest, auth_service: AuthServiceDep):
    await auth_service.send_password_reset_email(payload.email)
    return MessageOut(message="if the address is registered, a reset link has been sent")


@router.get(
    "/{token}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Check that a reset link is still valid",
)
async def check_password_reset_token(token: str, auth_service: AuthServiceDep):
    await auth_service.verify_password_reset_token(token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch(
    "/{token}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Set a new password with a reset link",
)
async def reset_password(token: str, payload: PasswordChangeRequest, auth_service: AuthServiceDep):
    await auth_service.reset_password(token, payload.password, payload.password_confirmation)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
