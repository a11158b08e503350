"""HTTP flows through the FastAPI application with in-memory gateways."""

from uuid import UUID, uuid4

import pytest
import pytest_asyncio

from warden.core.middleware import SECURITY_HEADERS
from warden.domain.entities.user import Role, User

REGISTER_PAYLOAD = {
    "name": "John Doe",
    "username": "john",
    "password": "secret123",
    "email": "john@example.com",
}


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def john_token(async_client):
    response = await async_client.post("/api/v1/auth/register", json=REGISTER_PAYLOAD)
    assert response.status_code == 201
    return response.json()["access_token"]


@pytest_asyncio.fixture
async def admin_token(async_client, repository, hasher):
    await repository.create(
        User(
            name="Admin",
            username="admin",
            email="admin@example.com",
            hashed_password=hasher.hash("adminpass1"),
            role=Role.ADMIN,
        )
    )
    response = await async_client.post(
        "/api/v1/auth/login", json={"username": "admin", "password": "adminpass1"}
    )
    return response.json()["access_token"]


class TestAuthEndpoints:
    @pytest.mark.asyncio
    async def test_register(self, async_client, mail_transport):
        response = await async_client.post("/api/v1/auth/register", json=REGISTER_PAYLOAD)

        assert response.status_code == 201
        body = response.json()
        assert body["token_type"] == "Bearer"
        assert body["user"]["username"] == "john"
        assert body["user"]["is_email_verified"] is False
        assert "hashed_password" not in body["user"]
        assert len(mail_transport.sent) == 1

    @pytest.mark.asyncio
    async def test_register_conflict(self, async_client, john_token):
        payload = dict(REGISTER_PAYLOAD, username="JOHN", email="x@example.com")

        response = await async_client.post("/api/v1/auth/register", json=payload)

        assert response.status_code == 409
        assert response.json() == {"detail": "username already taken", "code": "username_conflict"}

    @pytest.mark.asyncio
    async def test_register_validation(self, async_client):
        payload = dict(REGISTER_PAYLOAD, username="no")

        response = await async_client.post("/api/v1/auth/register", json=payload)

        assert response.status_code == 400
        assert response.json()["code"] == "username_too_short"

    @pytest.mark.asyncio
    async def test_login(self, async_client, john_token):
        response = await async_client.post(
            "/api/v1/auth/login", json={"username": "john", "password": "secret123"}
        )

        assert response.status_code == 200
        assert response.json()["access_token"] != john_token

    @pytest.mark.asyncio
    async def test_login_failure(self, async_client, john_token):
        response = await async_client.post(
            "/api/v1/auth/login", json={"username": "john", "password": "WRONG"}
        )

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["code"] == "invalid_credentials"

    @pytest.mark.asyncio
    async def test_logout_closes_session(self, async_client, john_token):
        response = await async_client.delete("/api/v1/auth/logout", headers=_bearer(john_token))
        assert response.status_code == 204

        response = await async_client.get("/api/v1/users/me", headers=_bearer(john_token))
        assert response.status_code == 401
        assert response.json()["code"] == "invalid_token"

    @pytest.mark.asyncio
    async def test_password_reset_request_is_rate_limited(self, async_client):
        first = await async_client.post(
            "/api/v1/auth/password-reset", json={"email": "nobody@example.com"}
        )
        second = await async_client.post(
            "/api/v1/auth/password-reset", json={"email": "nobody@example.com"}
        )

        assert first.status_code == 202
        assert first.headers["X-RateLimit-Limit"] == "1"
        assert second.status_code == 429
        assert second.headers["Retry-After"] == "60"
        assert second.json()["retry_after"] == 60

    @pytest.mark.asyncio
    async def test_password_reset_flow(
        self, async_client, john_token, container, mail_transport
    ):
        user_id = (await async_client.get("/api/v1/users/me", headers=_bearer(john_token))).json()["id"]
        await container.repository.verify_email(UUID(user_id))
        await async_client.post("/api/v1/auth/password-reset", json={"email": "john@example.com"})
        body = mail_transport.last["body"]
        marker = "/users/me/password/reset/"
        start = body.index(marker) + len(marker)
        token = body[start:body.index('"', start)]

        assert (await async_client.get(f"/api/v1/auth/password-reset/{token}")).status_code == 204
        response = await async_client.patch(
            f"/api/v1/auth/password-reset/{token}",
            json={"password": "brandnew1", "password_confirmation": "brandnew1"},
        )
        assert response.status_code == 204
        assert (await async_client.get(f"/api/v1/auth/password-reset/{token}")).status_code == 401
        me = await async_client.get("/api/v1/users/me", headers=_bearer(john_token))
        assert me.status_code == 401


class TestUserEndpoints:
    @pytest.mark.asyncio
    async def test_me_requires_token(self, async_client):
        response = await async_client.get("/api/v1/users/me")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me(self, async_client, john_token):
        response = await async_client.get("/api/v1/users/me", headers=_bearer(john_token))

        assert response.status_code == 200
        assert response.json()["email"] == "john@example.com"
        assert response.headers["X-RateLimit-Limit"] == "200"

    @pytest.mark.asyncio
    async def test_lookup_by_id_is_public(self, async_client, john_token):
        me = (await async_client.get("/api/v1/users/me", headers=_bearer(john_token))).json()

        response = await async_client.get(f"/api/v1/users/{me['id']}")

        assert response.status_code == 200
        assert response.json()["username"] == "john"

    @pytest.mark.asyncio
    async def test_lookup_invalid_id(self, async_client):
        response = await async_client.get("/api/v1/users/not-a-uuid")

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_user_id"

    @pytest.mark.asyncio
    async def test_lookup_unknown_id(self, async_client):
        response = await async_client.get(f"/api/v1/users/{uuid4()}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_change_password_closes_sessions(self, async_client, john_token):
        response = await async_client.patch(
            "/api/v1/users/me/password",
            json={"password": "brandnew1", "password_confirmation": "brandnew1"},
            headers=_bearer(john_token),
        )

        assert response.status_code == 204
        me = await async_client.get("/api/v1/users/me", headers=_bearer(john_token))
        assert me.status_code == 401

    @pytest.mark.asyncio
    async def test_verify_email_link(self, async_client, john_token, mail_transport):
        body = mail_transport.last["body"]
        marker = "/users/me/email/verify/"
        start = body.index(marker) + len(marker)
        token = body[start:body.index('"', start)]

        response = await async_client.get(f"/api/v1/users/me/verify-email/{token}")

        assert response.status_code == 204
        me = await async_client.get("/api/v1/users/me", headers=_bearer(john_token))
        assert me.json()["is_email_verified"] is True
        resend = await async_client.post(
            "/api/v1/users/me/verify-email/resend", headers=_bearer(john_token)
        )
        assert resend.status_code == 400
        assert resend.json()["code"] == "email_already_verified"

    @pytest.mark.asyncio
    async def test_avatar_upload_and_delete(self, async_client, john_token, storage):
        response = await async_client.post(
            "/api/v1/users/me/avatar",
            files={"file": ("me.png", b"\x89PNG data", "image/png")},
            headers=_bearer(john_token),
        )

        assert response.status_code == 200
        url = response.json()["avatar_url"]
        assert url.endswith(".png")
        assert len(storage.objects) == 1

        response = await async_client.delete("/api/v1/users/me/avatar", headers=_bearer(john_token))
        assert response.status_code == 204
        assert storage.objects == {}


class TestMailerEndpoint:
    @pytest.mark.asyncio
    async def test_requires_admin(self, async_client, john_token):
        response = await async_client.get("/api/v1/mailer", headers=_bearer(john_token))

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_gets_hello(self, async_client, admin_token, mail_transport):
        response = await async_client.get("/api/v1/mailer", headers=_bearer(admin_token))

        assert response.status_code == 202
        assert mail_transport.last["subject"] == "[DEBUG] Hello"
        assert "Hello, Admin!" in mail_transport.last["body"]


class TestMiddleware:
    @pytest.mark.asyncio
    async def test_security_headers_on_success(self, async_client, john_token):
        response = await async_client.get("/api/v1/users/me", headers=_bearer(john_token))

        assert response.status_code == 200
        for name, value in SECURITY_HEADERS.items():
            assert response.headers[name] == value

    @pytest.mark.asyncio
    async def test_security_headers_on_errors(self, async_client):
        unauthorized = await async_client.get("/api/v1/users/me")
        await async_client.post("/api/v1/auth/password-reset", json={"email": "a@example.com"})
        limited = await async_client.post(
            "/api/v1/auth/password-reset", json={"email": "a@example.com"}
        )

        assert unauthorized.status_code == 401
        assert limited.status_code == 429
        for response in (unauthorized, limited):
            assert response.headers["X-Content-Type-Options"] == "nosniff"
            assert response.headers["X-Frame-Options"] == "DENY"

    @pytest.mark.asyncio
    async def test_request_is_logged(self, async_client, mocker):
        logger = mocker.patch("warden.core.middleware.logger")

        await async_client.get("/api/v1/users/not-a-uuid")

        logger.info.assert_called_once()
        event, fields = logger.info.call_args.args[0], logger.info.call_args.kwargs
        assert event == "HTTP request"
        assert fields["method"] == "GET"
        assert fields["path"] == "/api/v1/users/not-a-uuid"
        assert fields["status"] == 400
        assert fields["duration_ms"] >= 0
