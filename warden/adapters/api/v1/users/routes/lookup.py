from uuid import UUID

from fastapi import APIRouter

from warden.adapters.api.v1.schemas import UserOut
from warden.core.dependencies.services import UserServiceDep
from warden.core.exceptions import InvalidUserIdError

router = APIRouter()


@router.get("/{user_id}", response_model=UserOut, summary="Return a user by id")
async def get_user(user_id: str, user_service: UserServiceDep):
    try:
        parsed = UUID(user_id)
    except ValueError:
        raise InvalidUserIdError()
    return UserOut.from_entity(await user_service.get_by_id(parsed))
