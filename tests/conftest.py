import os

os.environ.setdefault("APP_ENV", "development")
os.environ.setdefault("ACCESS_TOKEN_SIGNATURE", "test-signature-that-is-at-least-32-bytes-long")
os.environ.setdefault("BCRYPT_COST", "10")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("MAILER_DEBUG_TO", "debug@warden.test")
os.environ.setdefault("MAILER_BASE_URL", "https://app.warden.test")
os.environ.setdefault("EMAIL_VERIFICATION_TOKEN_DURATION_MINUTES", "60")
os.environ.setdefault("LOG_JSON", "false")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from tests.fakes import (
    FrozenClock,
    InMemoryCache,
    InMemoryStorage,
    RecordingErrorTracker,
    RecordingMailTransport,
)
from warden.core.application import create_application
from warden.core.config.settings import settings
from warden.domain.entities.user import UserDraft
from warden.infrastructure.database.async_db import (
    build_engine,
    build_session_factory,
    create_async_db_and_tables,
)
from warden.infrastructure.dependency_injection.container import build_container
from warden.infrastructure.repositories.user_repository import UserRepository
from warden.utils.security import PasswordHasher


@pytest.fixture(scope="session")
def hasher():
    return PasswordHasher(settings.BCRYPT_COST)


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def cache(clock):
    return InMemoryCache(clock)


@pytest.fixture
def mail_transport():
    return RecordingMailTransport()


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def error_tracker():
    return RecordingErrorTracker()


@pytest_asyncio.fixture
async def engine():
    engine = build_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_async_db_and_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def repository(engine, clock, error_tracker):
    return UserRepository(build_session_factory(engine), clock, error_tracker)


@pytest_asyncio.fixture
async def container(repository, cache, mail_transport, storage, error_tracker, clock, hasher):
    return build_container(
        settings,
        cache=cache,
        repository=repository,
        mail_transport=mail_transport,
        storage=storage,
        error_tracker=error_tracker,
        clock=clock,
        hasher=hasher,
    )


@pytest.fixture
def token_service(container):
    return container.token_service


@pytest.fixture
def user_service(container):
    return container.user_service


@pytest.fixture
def auth_service(container):
    return container.auth_service


@pytest.fixture
def john_draft():
    return UserDraft(
        name="John Doe", username="john", password="secret123", email="john@example.com"
    )


@pytest_asyncio.fixture
async def john(user_service, john_draft):
    return await user_service.register(john_draft)


@pytest_asyncio.fixture
async def async_client(container):
    app = create_application(container)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
