"""Response Pydantic models."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from warden.domain.entities.user import Role, User
from warden.domain.services.auth.auth_service import AuthResult


class UserOut(BaseModel):
    """Public representation of a user; never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    username: str
    email: str
    is_email_verified: bool
    role: Role
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> "UserOut":
        return cls.model_validate(user)


class AuthResponse(BaseModel):
    """Response returned by register & login endpoints."""

    user: UserOut
    access_token: str
    token_type: str = "Bearer"

    @classmethod
    def from_result(cls, result: AuthResult) -> "AuthResponse":
        return cls(user=UserOut.from_entity(result.user), access_token=result.access_token)


class AvatarOut(BaseModel):
    avatar_url: str


class MessageOut(BaseModel):
    message: str
