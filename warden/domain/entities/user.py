from datetime import datetime, timezone  # For timestamp fields
from enum import Enum  # For type-safe role enumeration
from typing import Optional
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlalchemy import text
from sqlmodel import Column, Field, Index, SQLModel, String


USERNAME_INDEX = "ux_users_username_lower"
VERIFIED_EMAIL_INDEX = "ux_users_verified_email_lower"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    """Represents the role of a user within the system.

    Attributes:
        ADMIN: Confers administrative privileges, such as the mailer endpoint.
        USER: Represents a standard user with regular access rights.
    """

    ADMIN = "admin"
    USER = "user"


class User(SQLModel, table=True):
    """Represents a User entity and acts as an Aggregate Root.

    Attributes:
        id: UUID v4, assigned on creation and never reassigned.
        name: Display name, at most 50 code points.
        username: Case-preserved login name; uniqueness is enforced on
            ``lower(username)``.
        email: Contact address. Only verified addresses are unique.
        hashed_password: bcrypt hash. ``None`` only in the cached form of the
            record, which never carries the hash.
        is_email_verified: Set once the user consumes an email-verification token.
        role: The user's role.
        avatar_url: Public URL of the uploaded avatar, if any.
        created_at: Creation timestamp (UTC).
        updated_at: Last mutation timestamp (UTC).
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(sa_column=Column(String(50), nullable=False))
    username: str = Field(sa_column=Column(String(15), nullable=False))
    email: str = Field(sa_column=Column(String(254), nullable=False))
    hashed_password: Optional[str] = Field(default=None, max_length=255)
    is_email_verified: bool = Field(default=False, nullable=False)
    role: Role = Field(
        default=Role.USER,
        sa_column=Column(
            sa.Enum(Role, name="role", values_callable=lambda roles: [r.value for r in roles]),
            nullable=False,
            default=Role.USER,
        ),
    )
    avatar_url: Optional[str] = Field(default=None, max_length=2048)
    created_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(sa.DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(sa.DateTime(timezone=True), nullable=False),
    )

    __table_args__ = (
        Index(USERNAME_INDEX, text("lower(username)"), unique=True),
        Index(
            VERIFIED_EMAIL_INDEX,
            text("lower(email)"),
            unique=True,
            postgresql_where=text("is_email_verified"),
            sqlite_where=text("is_email_verified"),
        ),
        {"extend_existing": True},
    )

    def to_cache(self) -> dict:
        """Serializable form stored in the user cache; the hash is left out."""
        return self.model_dump(mode="json", exclude={"hashed_password"})

    @classmethod
    def from_cache(cls, payload: dict) -> "User":
        return cls.model_validate(payload)


class UserDraft(SQLModel):
    """Unvalidated registration input."""

    name: str
    username: str
    password: str
    email: str


class UpdatePasswordParams(SQLModel):
    """Password change input; the confirmation must repeat the password."""

    password: str
    password_confirmation: str
