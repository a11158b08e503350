from datetime import timedelta
from uuid import uuid4

import pytest
from jwt import encode as jwt_encode

from warden.core.exceptions import InvalidTokenError
from warden.domain.value_objects.tokens import AccessTokenClaims, TokenKind, b64url_encode
from warden.infrastructure.services.authentication.token_codec import TokenCodec

SIGNING_KEY = "unit-test-signing-key-of-at-least-32-bytes"


@pytest.fixture
def codec(clock):
    return TokenCodec(SIGNING_KEY, clock)


def _claims(clock, **overrides):
    now = clock.now()
    values = dict(
        token_id=uuid4(),
        user_id=uuid4(),
        issued_at=now,
        expires_at=now + timedelta(minutes=15),
    )
    values.update(overrides)
    return AccessTokenClaims(**values)


class TestAccessTokens:
    def test_encode_then_decode(self, codec, clock):
        claims = _claims(clock)

        decoded = codec.decode_access(codec.encode_access(claims))

        assert decoded == claims

    def test_expired_token_is_rejected_by_clock(self, codec, clock):
        token = codec.encode_access(_claims(clock))

        clock.advance(timedelta(minutes=15))

        with pytest.raises(InvalidTokenError):
            codec.decode_access(token)

    def test_wrong_signature_is_rejected(self, codec, clock):
        other = TokenCodec("another-signing-key-of-at-least-32-bytes!", clock)

        with pytest.raises(InvalidTokenError):
            codec.decode_access(other.encode_access(_claims(clock)))

    def test_token_of_another_kind_is_rejected(self, codec, clock):
        payload = _claims(clock).to_payload()
        payload["type"] = TokenKind.PASSWORD_RESET.value
        token = jwt_encode(payload, SIGNING_KEY, algorithm="HS256")

        with pytest.raises(InvalidTokenError):
            codec.decode_access(token)

    def test_missing_claims_are_rejected(self, codec, clock):
        payload = _claims(clock).to_payload()
        del payload["id"]
        token = jwt_encode(payload, SIGNING_KEY, algorithm="HS256")

        with pytest.raises(InvalidTokenError):
            codec.decode_access(token)

    @pytest.mark.parametrize("garbage", ["", "abc", "a.b.c"])
    def test_garbage_is_rejected(self, codec, garbage):
        with pytest.raises(InvalidTokenError):
            codec.decode_access(garbage)


class TestOneTimeTokens:
    def test_wire_format(self, codec):
        user_id = uuid4()

        token = codec.new_one_time(TokenKind.PASSWORD_RESET, user_id)

        assert token.composite.startswith(f"{user_id}.")
        assert len(token.random_part) == 22
        assert "=" not in token.value
        assert codec.parse_one_time(TokenKind.PASSWORD_RESET, token.value) == token

    def test_hash_differs_from_plaintext(self, codec):
        token = codec.new_one_time(TokenKind.EMAIL_VERIFICATION, uuid4())

        assert token.hash != token.value
        assert token.random_part not in token.hash

    def test_tokens_are_random(self, codec):
        user_id = uuid4()

        first = codec.new_one_time(TokenKind.PASSWORD_RESET, user_id)
        second = codec.new_one_time(TokenKind.PASSWORD_RESET, user_id)

        assert first.random_part != second.random_part

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "%%%",
            b64url_encode(b"no-dot-here"),
            b64url_encode(b"not-a-uuid.AAAAAAAAAAAAAAAAAAAAAA"),
            b64url_encode(f"{uuid4()}.short".encode()),
        ],
    )
    def test_malformed_tokens_are_rejected(self, codec, raw):
        with pytest.raises(InvalidTokenError):
            codec.parse_one_time(TokenKind.PASSWORD_RESET, raw)
