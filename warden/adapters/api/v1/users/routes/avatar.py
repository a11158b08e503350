from fastapi import APIRouter, File, Response, UploadFile, status

from warden.adapters.api.v1.schemas import AvatarOut
from warden.core.dependencies.auth import CurrentClaims
from warden.core.dependencies.services import UserServiceDep
from warden.core.exceptions import BadRequestError

router = APIRouter()

MAX_AVATAR_BYTES = 5 * 1024 * 1024


@router.post("", response_model=AvatarOut, summary="Upload the avatar of the authenticated user")
async def upload_avatar(
    claims: CurrentClaims, user_service: UserServiceDep, file: UploadFile = File(...)
):
    data = await file.read(MAX_AVATAR_BYTES + 1)
    if len(data) > MAX_AVATAR_BYTES:
        raise BadRequestError("avatar must not exceed 5 MiB")
    url = await user_service.upload_avatar(claims.user_id, file.filename or "", data)
    return AvatarOut(avatar_url=url)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT, summary="Remove the avatar")
async def delete_avatar(claims: CurrentClaims, user_service: UserServiceDep):
    await user_service.delete_avatar(claims.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
