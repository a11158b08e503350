"""Request Pydantic models.

Only shapes are checked here; the services apply the real validation rules.
"""

from pydantic import BaseModel, Field

from warden.domain.entities.user import UpdatePasswordParams, UserDraft


class LoginRequest(BaseModel):
    username: str = Field(..., examples=["john"])
    password: str = Field(..., examples=["secret123"])


class RegisterRequest(BaseModel):
    name: str = Field(..., examples=["John Doe"])
    username: str = Field(..., examples=["john"])
    password: str = Field(..., examples=["secret123"])
    email: str = Field(..., examples=["john@example.com"])

    def to_draft(self) -> UserDraft:
        return UserDraft(
            name=self.name, username=self.username, password=self.password, email=self.email
        )


class PasswordResetRequest(BaseModel):
    email: str = Field(..., examples=["john@example.com"])


class PasswordChangeRequest(BaseModel):
    password: str
    password_confirmation: str

    def to_params(self) -> UpdatePasswordParams:
        return UpdatePasswordParams(
            password=self.password, password_confirmation=self.password_confirmation
        )
