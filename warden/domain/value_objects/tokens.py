"""Token value objects.

Two shapes of token exist and are never interchangeable:

- ``AccessTokenClaims``: the payload of a signed bearer token.
- ``OneTimeToken``: a single-use ``(kind, user_id, random_part)`` triple used
  in password-reset and email-verification links.

On the wire a one-time token is ``base64url(f"{user_id}.{random_part}")``.
Only ``OneTimeToken.hash`` (SHA-256 of the composite) is ever written to the
cache, so a read of the cache does not reveal a usable link.
"""

import base64
import hashlib
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID


class TokenKind(str, Enum):
    ACCESS = "access"
    PASSWORD_RESET = "password_reset"
    EMAIL_VERIFICATION = "email_verification"


ONE_TIME_KINDS = frozenset({TokenKind.PASSWORD_RESET, TokenKind.EMAIL_VERIFICATION})


def b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def b64url_decode(value: str) -> bytes:
    padding = "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(value + padding)


@dataclass(frozen=True)
class AccessTokenClaims:
    """Claims carried by an access token.

    Attributes:
        token_id: Unique id of this issuance; part of the session cache key.
        user_id: Subject of the token.
        issued_at: ``iat``.
        expires_at: ``exp``.
    """

    token_id: UUID
    user_id: UUID
    issued_at: datetime
    expires_at: datetime
    kind: TokenKind = TokenKind.ACCESS

    def to_payload(self) -> dict:
        return {
            "id": str(self.token_id),
            "sub": str(self.user_id),
            "iat": int(self.issued_at.timestamp()),
            "exp": int(self.expires_at.timestamp()),
            "type": self.kind.value,
        }

    @classmethod
    def from_payload(cls, payload: dict) -> "AccessTokenClaims":
        """Builds claims from a decoded payload.

        Raises:
            KeyError, ValueError, TypeError: On missing or malformed claims.
        """
        return cls(
            token_id=UUID(payload["id"]),
            user_id=UUID(payload["sub"]),
            issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
            kind=TokenKind(payload["type"]),
        )


@dataclass(frozen=True)
class OneTimeToken:
    kind: TokenKind
    user_id: UUID
    random_part: str

    @property
    def composite(self) -> str:
        return f"{self.user_id}.{self.random_part}"

    @property
    def value(self) -> str:
        """User-visible token placed in emailed links."""
        return b64url_encode(self.composite.encode("utf-8"))

    @property
    def hash(self) -> str:
        return b64url_encode(hashlib.sha256(self.composite.encode("utf-8")).digest())
