"""Token codec: signing of access tokens and (de)serialization of one-time tokens.

Access tokens are compact HS256 JWTs. Expiry is checked against the injected
clock rather than PyJWT's own wall-clock check so that tests can move time.
"""

import binascii
import secrets
from typing import Optional
from uuid import UUID

import structlog
from jwt import PyJWTError
from jwt import decode as jwt_decode
from jwt import encode as jwt_encode

from warden.core.exceptions import InvalidTokenError
from warden.domain.interfaces.clock import IClock
from warden.domain.value_objects.tokens import (
    AccessTokenClaims,
    OneTimeToken,
    TokenKind,
    b64url_decode,
    b64url_encode,
)

logger = structlog.get_logger(__name__)

ALGORITHM = "HS256"
RANDOM_PART_BYTES = 16


class TokenCodec:
    def __init__(self, signing_key: str, clock: IClock):
        self._signing_key = signing_key
        self._clock = clock

    # ------------------------------------------------------------------
    # Access tokens
    # ------------------------------------------------------------------

    def encode_access(self, claims: AccessTokenClaims) -> str:
        return jwt_encode(claims.to_payload(), self._signing_key, algorithm=ALGORITHM)

    def decode_access(self, token: str) -> AccessTokenClaims:
        """Validates signature, kind and expiry of an access token.

        Raises:
            InvalidTokenError: On any signature, structure, kind or expiry failure.
        """
        try:
            payload = jwt_decode(
                token,
                self._signing_key,
                algorithms=[ALGORITHM],
                options={"verify_exp": False, "verify_iat": False, "require": ["exp", "sub"]},
            )
            claims = AccessTokenClaims.from_payload(payload)
        except PyJWTError as e:
            logger.debug("Access token rejected", reason=type(e).__name__)
            raise InvalidTokenError() from e
        except (KeyError, ValueError, TypeError) as e:
            logger.debug("Access token has malformed claims", reason=type(e).__name__)
            raise InvalidTokenError() from e

        if claims.kind is not TokenKind.ACCESS:
            logger.debug("Token of wrong kind presented as access token", kind=claims.kind.value)
            raise InvalidTokenError()
        if claims.expires_at <= self._clock.now():
            raise InvalidTokenError()
        return claims

    # ------------------------------------------------------------------
    # One-time tokens
    # ------------------------------------------------------------------

    @staticmethod
    def new_one_time(kind: TokenKind, user_id: UUID) -> OneTimeToken:
        random_part = b64url_encode(secrets.token_bytes(RANDOM_PART_BYTES))
        return OneTimeToken(kind=kind, user_id=user_id, random_part=random_part)

    @staticmethod
    def parse_one_time(kind: TokenKind, token: Optional[str]) -> OneTimeToken:
        """Inverse of ``OneTimeToken.value``.

        Raises:
            InvalidTokenError: If the token is not a well-formed composite.
        """
        if not token:
            raise InvalidTokenError()
        try:
            composite = b64url_decode(token).decode("utf-8")
            user_part, random_part = composite.split(".", 1)
            user_id = UUID(user_part)
            raw = b64url_decode(random_part)
        except (binascii.Error, UnicodeDecodeError, ValueError) as e:
            raise InvalidTokenError() from e
        if len(raw) != RANDOM_PART_BYTES or b64url_encode(raw) != random_part:
            raise InvalidTokenError()
        return OneTimeToken(kind=kind, user_id=user_id, random_part=random_part)
