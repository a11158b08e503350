from fastapi import APIRouter, Depends, Response, status

from warden.adapters.api.v1.schemas import MessageOut, PasswordChangeRequest, UserOut
from warden.core.dependencies.auth import CurrentClaims, CurrentUser
from warden.core.dependencies.rate_limit import mail_rate_limit
from warden.core.dependencies.services import UserServiceDep

router = APIRouter()


@router.get("", response_model=UserOut, summary="Return the authenticated user")
async def get_me(current_user: CurrentUser):
    return UserOut.from_entity(current_user)


@router.patch(
    "/password",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Change the password and close every session",
)
async def change_password(
    payload: PasswordChangeRequest, claims: CurrentClaims, user_service: UserServiceDep
):
    await user_service.update_password(claims.user_id, payload.to_params())
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/verify-email/{token}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Confirm ownership of the email address",
)
async def verify_email(token: str, user_service: UserServiceDep):
    await user_service.verify_email(token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/verify-email/resend",
    response_model=MessageOut,
    status_code=status.HTTP_202_ACCEPTED,
    dependencies=[Depends(mail_rate_limit)],
    summary="Send a new verification link",
)
async def resend_verification(claims: CurrentClaims, user_service: UserServiceDep):
    await user_service.resend_email_verification(claims.user_id)
    return MessageOut(message="verification email sent")
