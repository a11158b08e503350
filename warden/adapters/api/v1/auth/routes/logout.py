from fastapi import APIRouter, Response, status

from warden.core.dependencies.auth import BearerToken
from warden.core.dependencies.services import AuthServiceDep

router = APIRouter()


@router.delete("", status_code=status.HTTP_204_NO_CONTENT, summary="Close the current session")
async def logout_user(token: BearerToken, auth_service: AuthServiceDep):
    await auth_service.logout(token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
