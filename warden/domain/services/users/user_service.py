"""User service: validation and every mutation of a user record.

Input is validated here even when the transport layer has already done so.
Reads by id go through a cache-aside entry (``user:{id}``) that is dropped
after each mutation; the cached form never carries the password hash.
"""

import json
from typing import Optional
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from structlog import get_logger

from warden.core.exceptions import (
    BadRequestError,
    CacheNotFoundError,
    EmailAlreadyVerifiedError,
    EmailConflictError,
    UserNotFoundError,
    UsernameConflictError,
)
from warden.core.logging import mask_email
from warden.domain.entities.user import UpdatePasswordParams, User, UserDraft
from warden.domain.interfaces.cache import ICache
from warden.domain.interfaces.repositories import IUserRepository
from warden.domain.interfaces.storage import IObjectStorage
from warden.domain.services.auth.token import TokenService
from warden.domain.services.email.mailer_service import MailerService
from warden.domain.validation import user_rules
from warden.domain.value_objects.tokens import TokenKind
from warden.utils.security import PasswordHasher

logger = get_logger(__name__)

AVATAR_PREFIX = "avatars"
AVATAR_CONTENT_TYPES = {"png": "image/png", "jpg": "image/jpeg", "jpeg": "image/jpeg"}


def user_cache_key(user_id: UUID) -> str:
    return f"user:{user_id}"


def avatar_extension(name: Optional[str]) -> str:
    """Lower-cased extension of a filename or URL path, without the dot."""
    if not name:
        return ""
    last = name.split("?", 1)[0].rsplit("/", 1)[-1]
    if "." not in last:
        return ""
    return last.rsplit(".", 1)[-1].lower()


class UserService:
    """Domain service for user lookup and mutation.

    Attributes:
        repository (IUserRepository): Persistent user store.
        cache (ICache): Session cache, used for the user cache-aside entries.
        token_service (TokenService): Mints verification tokens and revokes sessions.
        mailer (MailerService): Sends verification emails.
        storage (IObjectStorage): Avatar object store.
        hasher (PasswordHasher): bcrypt hasher.
        user_cache_ttl (int): Lifetime of ``user:{id}`` entries, in seconds.
    """

    def __init__(
        self,
        repository: IUserRepository,
        cache: ICache,
        token_service: TokenService,
        mailer: MailerService,
        storage: IObjectStorage,
        hasher: PasswordHasher,
        user_cache_ttl: int = 300,
    ):
        self.repository = repository
        self.cache = cache
        self.token_service = token_service
        self.mailer = mailer
        self.storage = storage
        self.hasher = hasher
        self.user_cache_ttl = user_cache_ttl

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def get_by_id(self, user_id: UUID) -> User:
        """Return a user, served from the cache when possible.

        Raises:
            UserNotFoundError: If no such user exists.
        """
        key = user_cache_key(user_id)
        try:
            cached = await self.cache.get(key)
        except CacheNotFoundError:
            cached = None
        if cached is not None:
            try:
                return User.from_cache(json.loads(cached))
            except (ValueError, PydanticValidationError):
                logger.warning("Discarding unreadable cached user", user_id=str(user_id))

        user = await self.repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        await self.cache.set(key, json.dumps(user.to_cache()), self.user_cache_ttl)
        return user

    async def get_by_username(self, username: str) -> User:
        user = await self.repository.get_by_username(username.strip())
        if user is None:
            raise UserNotFoundError()
        return user

    async def get_id_by_verified_email(self, email: str) -> Optional[UUID]:
        return await self.repository.get_id_by_verified_email(email)

    # ------------------------------------------------------------------
    # Registration and email verification
    # ------------------------------------------------------------------

    async def register(self, draft: UserDraft) -> User:
        """Validate a draft and create the user.

        Raises:
            ValidationError: If any field breaks a rule.
            UsernameConflictError: If the username is taken, in any case.
            EmailConflictError: If a verified user already owns the email.
        """
        name = user_rules.validate_name(draft.name)
        username = user_rules.validate_username(draft.username)
        password = user_rules.validate_password(draft.password)
        email = user_rules.validate_email(draft.email)

        if await self.repository.get_by_username(username) is not None:
            raise UsernameConflictError()
        if await self.repository.get_id_by_verified_email(email) is not None:
            raise EmailConflictError()

        user = User(
            name=name,
            username=username,
            email=email,
            hashed_password=self.hasher.hash(password),
        )
        created = await self.repository.create(user)
        logger.info("User registered", user_id=str(created.id), email=mask_email(email))
        return created

    async def send_email_verification(self, user: User) -> None:
        kind = TokenKind.EMAIL_VERIFICATION
        token = await self.token_service.generate_one_time_token(kind, user.id)
        await self.mailer.send_verify_email(user, token, self.token_service.duration(kind))

    async def resend_email_verification(self, user_id: UUID) -> None:
        """
        Raises:
            UserNotFoundError: If no such user exists.
            EmailAlreadyVerifiedError: If the email is already verified.
        """
        user = await self.get_by_id(user_id)
        if user.is_email_verified:
            raise EmailAlreadyVerifiedError()
        await self.send_email_verification(user)

    async def verify_email(self, token: str) -> UUID:
        """Consume an email-verification token and mark the email verified.

        The token is used up even if the store then refuses the change.

        Raises:
            InvalidTokenError: If the token is not live.
            EmailConflictError: If another user already verified the same email.
        """
        user_id = await self.token_service.consume_one_time_token(
            TokenKind.EMAIL_VERIFICATION, token
        )
        await self.repository.verify_email(user_id)
        await self.cache.delete(user_cache_key(user_id))
        return user_id

    # ------------------------------------------------------------------
    # Passwords
    # ------------------------------------------------------------------

    async def update_password(self, user_id: UUID, params: UpdatePasswordParams) -> None:
        """Change the password and log the user out of every session.

        Raises:
            ValidationError: If the password or its confirmation is rejected.
            UserNotFoundError: If no such user exists.
        """
        password = user_rules.validate_password_confirmation(
            params.password, params.password_confirmation
        )
        if await self.repository.get_by_id(user_id) is None:
            raise UserNotFoundError()
        await self.set_password(user_id, password)

    async def set_password(self, user_id: UUID, password: str) -> None:
        """Store an already validated password and close every session of the user."""
        await self.repository.update_password(user_id, self.hasher.hash(password))
        await self.cache.delete(user_cache_key(user_id))
        await self.token_service.revoke_all_access_tokens(user_id)

    # ------------------------------------------------------------------
    # Avatars
    # ------------------------------------------------------------------

    async def upload_avatar(self, user_id: UUID, filename: str, data: bytes) -> str:
        """Store an avatar under ``avatars/{user_id}.{ext}`` and return its URL.

        The stored content type follows the extension.
        The previous object is removed only once the new one is stored and
        recorded.

        Raises:
            BadRequestError: If the file is empty or is not a png or jpeg image.
            FileUploadError: If the object store fails.
        """
        extension = avatar_extension(filename)
        if extension not in AVATAR_CONTENT_TYPES:
            raise BadRequestError("avatar must be a png, jpg or jpeg image")
        if not data:
            raise BadRequestError("avatar must not be empty")

        user = await self.repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        previous_extension = avatar_extension(user.avatar_url)

        url = await self.storage.upload(
            f"{AVATAR_PREFIX}/{user_id}.{extension}", data, AVATAR_CONTENT_TYPES[extension]
        )
        await self.repository.update_avatar(user_id, url)
        await self.cache.delete(user_cache_key(user_id))

        if previous_extension and previous_extension != extension:
            await self.storage.delete(f"{AVATAR_PREFIX}/{user_id}.{previous_extension}")
        logger.info("Avatar uploaded", user_id=str(user_id), extension=extension)
        return url

    async def delete_avatar(self, user_id: UUID) -> None:
        user = await self.repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        if not user.avatar_url:
            return
        extension = avatar_extension(user.avatar_url)
        await self.storage.delete(f"{AVATAR_PREFIX}/{user_id}.{extension}")
        await self.repository.delete_avatar(user_id)
        await self.cache.delete(user_cache_key(user_id))
        logger.info("Avatar deleted", user_id=str(user_id))
