"""User repository implementation using SQLModel / SQLAlchemy async sessions.

Each public method runs in its own session and transaction and is bounded by
``DATABASE_QUERY_TIMEOUT``. Unique-index violations are translated into
domain conflicts; any other storage failure is reported to the error
tracker and raised as ``InternalError``.
"""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from warden.core.exceptions import (
    EmailConflictError,
    InternalError,
    UserNotFoundError,
    UsernameConflictError,
    WardenError,
)
from warden.core.logging import mask_email
from warden.domain.entities.user import USERNAME_INDEX, VERIFIED_EMAIL_INDEX, User
from warden.domain.interfaces.clock import IClock
from warden.domain.interfaces.error_tracking import IErrorTracker
from warden.domain.interfaces.repositories import IUserRepository
from warden.infrastructure.database.async_db import get_async_db

logger = get_logger(__name__)

T = TypeVar("T")


def conflict_from_integrity_error(error: IntegrityError) -> WardenError:
    """Maps a unique-index violation to the matching domain conflict.

    Only the two case-insensitive unique indexes count as conflicts; any other
    integrity failure, such as a NOT NULL violation, is an internal error.
    """
    detail = str(error.orig if error.orig is not None else error)
    if USERNAME_INDEX in detail:
        return UsernameConflictError()
    if VERIFIED_EMAIL_INDEX in detail:
        return EmailConflictError()
    return InternalError()


class UserRepository(IUserRepository):
    """SQLAlchemy implementation of ``IUserRepository``."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        clock: IClock,
        error_tracker: IErrorTracker,
        query_timeout: float = 5.0,
    ):
        self.session_factory = session_factory
        self.clock = clock
        self.error_tracker = error_tracker
        self.query_timeout = query_timeout

    async def _run(self, operation: str, work: Callable[[AsyncSession], Awaitable[T]]) -> T:
        async def _in_session() -> T:
            async with get_async_db(self.session_factory) as session:
                return await work(session)

        try:
            return await asyncio.wait_for(_in_session(), timeout=self.query_timeout)
        except WardenError:
            raise
        except IntegrityError as e:
            mapped = conflict_from_integrity_error(e)
            if isinstance(mapped, InternalError):
                self.error_tracker.capture_exception(e, operation=operation)
            logger.info("Unique constraint violated", operation=operation, error_code=mapped.code)
            raise mapped from e
        except (SQLAlchemyError, asyncio.TimeoutError) as e:
            logger.error("User store operation failed", operation=operation, error_type=type(e).__name__)
            self.error_tracker.capture_exception(e, operation=operation)
            raise InternalError() from e

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        async def work(session: AsyncSession) -> Optional[User]:
            return await session.get(User, user_id)

        return await self._run("get_by_id", work)

    async def get_by_username(self, username: str) -> Optional[User]:
        async def work(session: AsyncSession) -> Optional[User]:
            statement = select(User).where(func.lower(User.username) == username.lower())
            result = await session.execute(statement)
            return result.scalars().first()

        user = await self._run("get_by_username", work)
        logger.debug("User lookup by username", found=user is not None)
        return user

    async def get_id_by_verified_email(self, email: str) -> Optional[UUID]:
        async def work(session: AsyncSession) -> Optional[UUID]:
            statement = select(User.id).where(
                func.lower(User.email) == email.lower(),
                User.is_email_verified.is_(True),
            )
            result = await session.execute(statement)
            return result.scalars().first()

        user_id = await self._run("get_id_by_verified_email", work)
        logger.debug("Verified email lookup", email=mask_email(email), found=user_id is not None)
        return user_id

    async def create(self, user: User) -> User:
        now = self.clock.now()
        user.created_at = now
        user.updated_at = now

        async def work(session: AsyncSession) -> User:
            session.add(user)
            await session.commit()
            return user

        created = await self._run("create", work)
        logger.info("User created", user_id=str(created.id))
        return created

    async def _update(self, operation: str, user_id: UUID, **values) -> None:
        values["updated_at"] = self.clock.now()

        async def work(session: AsyncSession) -> int:
            result = await session.execute(update(User).where(User.id == user_id).values(**values))
            await session.commit()
            return result.rowcount

        if not await self._run(operation, work):
            raise UserNotFoundError()

    async def update_password(self, user_id: UUID, hashed_password: str) -> None:
        await self._update("update_password", user_id, hashed_password=hashed_password)
        logger.info("Password updated", user_id=str(user_id))

    async def verify_email(self, user_id: UUID) -> None:
        now = self.clock.now()

        async def work(session: AsyncSession) -> None:
            user = await session.get(User, user_id)
            if user is None:
                raise UserNotFoundError()
            if user.is_email_verified:
                return
            statement = select(User.id).where(
                func.lower(User.email) == user.email.lower(),
                User.is_email_verified.is_(True),
                User.id != user_id,
            )
            if (await session.execute(statement)).scalars().first() is not None:
                raise EmailConflictError()
            await session.execute(
                update(User).where(User.id == user_id).values(is_email_verified=True, updated_at=now)
            )
            await session.commit()

        await self._run("verify_email", work)
        logger.info("Email verified", user_id=str(user_id))

    async def update_avatar(self, user_id: UUID, avatar_url: str) -> None:
        await self._update("update_avatar", user_id, avatar_url=avatar_url)

    async def delete_avatar(self, user_id: UUID) -> None:
        await self._update("delete_avatar", user_id, avatar_url=None)
