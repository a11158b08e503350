"""Repository interfaces for abstracting data persistence in the domain layer.

Concrete implementations live in ``warden.infrastructure.repositories``.
Every call is bounded by a per-query deadline; unique-key violations surface
as ``UsernameConflictError`` / ``EmailConflictError`` and unexpected storage
failures as ``InternalError``.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from warden.domain.entities.user import User


class IUserRepository(ABC):
    """An interface defining the contract for user persistence operations."""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Retrieves a user by their unique identifier.

        Returns:
            An optional `User` entity. Returns `None` if no user is found.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        """Retrieves a user by their username, compared case-insensitively."""
        raise NotImplementedError

    @abstractmethod
    async def get_id_by_verified_email(self, email: str) -> Optional[UUID]:
        """Returns the id of the user owning ``email`` as a verified address."""
        raise NotImplementedError

    @abstractmethod
    async def create(self, user: User) -> User:
        """Persists a new user.

        Raises:
            UsernameConflictError: If the username is taken.
        """
        raise NotImplementedError

    @abstractmethod
    async def update_password(self, user_id: UUID, hashed_password: str) -> None:
        """Replaces the stored hash.

        Raises:
            UserNotFoundError: If no such user exists.
        """
        raise NotImplementedError

    @abstractmethod
    async def verify_email(self, user_id: UUID) -> None:
        """Marks the user's email as verified.

        Raises:
            UserNotFoundError: If no such user exists.
            EmailConflictError: If another user already owns the address as verified.
        """
        raise NotImplementedError

    @abstractmethod
    async def update_avatar(self, user_id: UUID, avatar_url: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def delete_avatar(self, user_id: UUID) -> None:
        raise NotImplementedError
