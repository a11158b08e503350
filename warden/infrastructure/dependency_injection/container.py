"""Service wiring.

``build_container`` composes the ports (cache, user store, mail transport,
object storage, error tracker, clock) into the domain services by
constructor injection. Any port can be overridden, which is how the test
suite swaps in in-memory fakes. The application keeps one container on
``app.state.container`` for its whole lifespan.
"""

from dataclasses import dataclass
from typing import Optional

from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from warden.core.clock import system_clock
from warden.core.config.settings import Settings
from warden.core.rate_limiting.ratelimiter import RateLimiter
from warden.domain.interfaces.cache import ICache
from warden.domain.interfaces.clock import IClock
from warden.domain.interfaces.error_tracking import IErrorTracker
from warden.domain.interfaces.mail import IMailTransport
from warden.domain.interfaces.repositories import IUserRepository
from warden.domain.interfaces.storage import IObjectStorage
from warden.domain.services.auth.auth_service import AuthService
from warden.domain.services.auth.token import TokenService
from warden.domain.services.email.mailer_service import MailerService
from warden.domain.services.users.user_service import UserService
from warden.domain.value_objects.tokens import TokenKind
from warden.infrastructure.cache.redis_cache import RedisCache
from warden.infrastructure.database.async_db import get_session_factory
from warden.infrastructure.repositories.user_repository import UserRepository
from warden.infrastructure.services.authentication.token_codec import TokenCodec
from warden.infrastructure.services.email.fastmail_transport import (
    FastMailTransport,
    build_connection_config,
)
from warden.infrastructure.services.error_tracking.sentry_tracker import SentryErrorTracker
from warden.infrastructure.services.storage.minio_storage import MinioStorage, get_minio_client
from warden.utils.security import PasswordHasher


@dataclass
class Container:
    settings: Settings
    clock: IClock
    error_tracker: IErrorTracker
    cache: ICache
    repository: IUserRepository
    mailer: MailerService
    token_service: TokenService
    user_service: UserService
    auth_service: AuthService
    global_limiter: RateLimiter
    mail_limiter: RateLimiter


def build_container(
    settings: Settings,
    *,
    redis_client: Optional[Redis] = None,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    cache: Optional[ICache] = None,
    repository: Optional[IUserRepository] = None,
    mail_transport: Optional[IMailTransport] = None,
    storage: Optional[IObjectStorage] = None,
    error_tracker: Optional[IErrorTracker] = None,
    clock: Optional[IClock] = None,
    hasher: Optional[PasswordHasher] = None,
) -> Container:
    clock = clock or system_clock
    error_tracker = error_tracker or SentryErrorTracker()

    if cache is None:
        if redis_client is None:
            raise ValueError("either a cache or a redis client is required")
        cache = RedisCache(redis_client, error_tracker, timeout=settings.CACHE_OPERATION_TIMEOUT)

    if repository is None:
        repository = UserRepository(
            session_factory or get_session_factory(),
            clock,
            error_tracker,
            query_timeout=settings.DATABASE_QUERY_TIMEOUT,
        )

    if mail_transport is None:
        mail_transport = FastMailTransport(build_connection_config(settings))

    if storage is None:
        storage = MinioStorage(
            get_minio_client(),
            settings.MINIO_BUCKET,
            settings.storage_public_url,
            error_tracker,
        )

    hasher = hasher or PasswordHasher(settings.BCRYPT_COST)

    mailer = MailerService(
        mail_transport,
        error_tracker,
        templates_dir=settings.MAILER_TEMPLATES_DIR,
        base_url=settings.MAILER_BASE_URL,
        debug_to=settings.MAILER_DEBUG_TO,
        production=settings.is_production,
    )
    token_service = TokenService(
        cache,
        TokenCodec(settings.ACCESS_TOKEN_SIGNATURE.get_secret_value(), clock),
        clock,
        access_token_duration=settings.access_token_duration,
        one_time_durations={
            TokenKind.PASSWORD_RESET: settings.password_reset_token_duration,
            TokenKind.EMAIL_VERIFICATION: settings.email_verification_token_duration,
        },
    )
    user_service = UserService(
        repository,
        cache,
        token_service,
        mailer,
        storage,
        hasher,
        user_cache_ttl=settings.USER_CACHE_TTL_SECONDS,
    )
    auth_service = AuthService(user_service, token_service, mailer, hasher)

    return Container(
        settings=settings,
        clock=clock,
        error_tracker=error_tracker,
        cache=cache,
        repository=repository,
        mailer=mailer,
        token_service=token_service,
        user_service=user_service,
        auth_service=auth_service,
        global_limiter=RateLimiter.from_rate("global", cache, settings.RATE_LIMIT_GLOBAL),
        mail_limiter=RateLimiter.from_rate("mail", cache, settings.RATE_LIMIT_MAIL),
    )
