"""End-to-end flows through the domain services with in-memory gateways."""

import time
from datetime import timedelta
from uuid import UUID

import pytest

from warden.core.exceptions import InvalidCredentialsError, InvalidTokenError, UsernameConflictError
from warden.domain.entities.user import UpdatePasswordParams, UserDraft
from warden.domain.value_objects.tokens import TokenKind


@pytest.mark.asyncio
async def test_register_happy_path(auth_service, token_service, john_draft):
    result = await auth_service.register(john_draft)

    assert isinstance(result.user.id, UUID)
    assert result.user.is_email_verified is False
    assert result.access_token
    assert (await token_service.verify_access_token(result.access_token)).user_id == result.user.id


@pytest.mark.asyncio
async def test_duplicate_username(auth_service, john):
    draft = UserDraft(name="Other", username="john", password="secret123", email="x@example.com")

    with pytest.raises(UsernameConflictError):
        await auth_service.register(draft)


@pytest.mark.asyncio
async def test_login_failures_cost_the_same(auth_service, john):
    async def measure(username):
        timings = []
        for _ in range(3):
            started = time.perf_counter()
            with pytest.raises(InvalidCredentialsError):
                await auth_service.login(username, "WRONG")
            timings.append(time.perf_counter() - started)
        return min(timings)

    wrong_password = await measure("john")
    unknown_user = await measure("ghost")

    assert unknown_user <= 2 * wrong_password


@pytest.mark.asyncio
async def test_password_reset_is_single_use(auth_service, repository, cache, john):
    await repository.verify_email(john.id)

    await auth_service.send_password_reset_email("john@example.com")

    assert len(cache.matching("one_time:password_reset:*")) == 1
    token = _link_token(auth_service, "/users/me/password/reset/")
    await auth_service.reset_password(token, "newpass12", "newpass12")
    with pytest.raises(InvalidTokenError):
        await auth_service.reset_password(token, "newpass12", "newpass12")


@pytest.mark.asyncio
async def test_verification_expires(user_service, token_service, clock, john):
    token = await token_service.generate_one_time_token(TokenKind.EMAIL_VERIFICATION, john.id)

    clock.advance(timedelta(hours=1, seconds=1))

    with pytest.raises(InvalidTokenError):
        await user_service.verify_email(token)
    assert (await user_service.get_by_id(john.id)).is_email_verified is False


@pytest.mark.asyncio
async def test_password_change_logs_out_everywhere(auth_service, user_service, token_service, john):
    first = await auth_service.login("john", "secret123")
    second = await auth_service.login("john", "secret123")

    await user_service.update_password(
        john.id, UpdatePasswordParams(password="newpass12", password_confirmation="newpass12")
    )

    for session in (first, second):
        with pytest.raises(InvalidTokenError):
            await token_service.verify_access_token(session.access_token)


def _link_token(auth_service, marker: str) -> str:
    body = auth_service.mailer.transport.last["body"]
    start = body.index(marker) + len(marker)
    return body[start:body.index('"', start)]
