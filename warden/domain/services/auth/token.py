"""Token service: minting, verification, consumption and revocation of tokens.

The cache is the authority for token liveness. An access token is live only
while its signature validates, its ``exp`` is in the future *and* its
session entry exists; a one-time token is live only while its hashed entry
exists.

Cache layout::

    access_token:{user_id}:{token_id}   -> signed token        (TTL: access duration)
    one_time:{kind}:{hash}              -> user id             (TTL: kind duration)
    one_time_owner:{kind}:{user_id}     -> hash of latest token (TTL: kind duration)
"""

import hmac
from datetime import timedelta
from typing import Mapping
from uuid import UUID, uuid4

from structlog import get_logger

from warden.core.exceptions import CacheNotFoundError, InvalidTokenError
from warden.domain.interfaces.cache import ICache
from warden.domain.interfaces.clock import IClock
from warden.domain.value_objects.tokens import ONE_TIME_KINDS, AccessTokenClaims, TokenKind
from warden.infrastructure.services.authentication.token_codec import TokenCodec

logger = get_logger(__name__)


class TokenService:
    """Service for managing access tokens and one-time email tokens.

    Attributes:
        cache (ICache): Session cache holding live tokens.
        codec (TokenCodec): Signs access tokens and (de)serializes one-time tokens.
        clock (IClock): Source of ``iat`` / ``exp``.
        access_token_duration (timedelta): Lifetime of access tokens and their sessions.
        one_time_durations (Mapping[TokenKind, timedelta]): Lifetime per one-time kind.
    """

    def __init__(
        self,
        cache: ICache,
        codec: TokenCodec,
        clock: IClock,
        access_token_duration: timedelta,
        one_time_durations: Mapping[TokenKind, timedelta],
    ):
        self.cache = cache
        self.codec = codec
        self.clock = clock
        self.access_token_duration = access_token_duration
        self.one_time_durations = dict(one_time_durations)

    # ------------------------------------------------------------------
    # Access tokens
    # ------------------------------------------------------------------

    async def generate_access_token(self, user_id: UUID) -> str:
        """Mint an access token and open its session entry.

        Returns:
            str: The signed token.
        """
        now = self.clock.now().replace(microsecond=0)
        claims = AccessTokenClaims(
            token_id=uuid4(),
            user_id=user_id,
            issued_at=now,
            expires_at=now + self.access_token_duration,
        )
        token = self.codec.encode_access(claims)
        await self.cache.set(
            self._access_key(user_id, claims.token_id),
            token,
            _seconds(self.access_token_duration),
        )
        logger.info("Access token issued", user_id=str(user_id), token_id=str(claims.token_id))
        return token

    async def verify_access_token(self, token: str) -> AccessTokenClaims:
        """Validate an access token against its signature and its session entry.

        Raises:
            InvalidTokenError: If the token is malformed, expired, of another
                kind, revoked, or does not match the stored session.
        """
        claims = self.codec.decode_access(token)
        try:
            stored = await self.cache.get(self._access_key(claims.user_id, claims.token_id))
        except CacheNotFoundError:
            logger.debug("Access token has no live session", token_id=str(claims.token_id))
            raise InvalidTokenError()
        if not hmac.compare_digest(stored.encode("utf-8"), token.encode("utf-8")):
            raise InvalidTokenError()
        return claims

    async def revoke_access_token(self, token: str) -> None:
        """Close the session of ``token``. Revoking an already closed session succeeds.

        Raises:
            InvalidTokenError: If the token is malformed or expired.
        """
        claims = self.codec.decode_access(token)
        existed = await self.cache.delete(self._access_key(claims.user_id, claims.token_id))
        logger.info(
            "Access token revoked",
            user_id=str(claims.user_id),
            token_id=str(claims.token_id),
            was_live=existed,
        )

    async def revoke_all_access_tokens(self, user_id: UUID) -> int:
        """Close every session of ``user_id``; returns how many were live."""
        removed = await self.cache.delete_by_prefix(f"access_token:{user_id}:")
        logger.info("All access tokens revoked", user_id=str(user_id), sessions=removed)
        return removed

    # ------------------------------------------------------------------
    # One-time tokens
    # ------------------------------------------------------------------

    async def generate_one_time_token(self, kind: TokenKind, user_id: UUID) -> str:
        """Mint a one-time token, superseding any earlier token of the same kind.

        Returns:
            str: The user-visible token; only its hash is stored.
        """
        ttl = _seconds(self.duration(kind))
        token = self.codec.new_one_time(kind, user_id)

        # The new entry exists before the owner pointer moves to it, so each
        # superseded hash is returned by exactly one swap and deleted there.
        await self.cache.set(self._one_time_key(kind, token.hash), str(user_id), ttl)
        previous_hash = await self.cache.get_set(self._owner_key(kind, user_id), token.hash, ttl)
        if previous_hash and previous_hash != token.hash:
            await self.cache.delete(self._one_time_key(kind, previous_hash))
        logger.info(
            "One-time token issued",
            kind=kind.value,
            user_id=str(user_id),
            superseded=previous_hash is not None,
        )
        return token.value

    async def verify_one_time_token(self, kind: TokenKind, token: str) -> UUID:
        """Check that a one-time token is live without using it up.

        Raises:
            InvalidTokenError: If the token is malformed, used, superseded or expired.
        """
        parsed = self.codec.parse_one_time(kind, token)
        try:
            stored_user_id = await self.cache.get(self._one_time_key(kind, parsed.hash))
        except CacheNotFoundError:
            raise InvalidTokenError()
        return _matching_user_id(stored_user_id, parsed.user_id)

    async def consume_one_time_token(self, kind: TokenKind, token: str) -> UUID:
        """Use up a one-time token and return its user id.

        The cache entry is removed by a single atomic read-and-delete, so of
        any number of concurrent consumers exactly one succeeds.

        Raises:
            InvalidTokenError: If the token is malformed, already used,
                superseded or expired.
        """
        parsed = self.codec.parse_one_time(kind, token)
        try:
            stored_user_id = await self.cache.get_delete(self._one_time_key(kind, parsed.hash))
        except CacheNotFoundError:
            logger.info("One-time token rejected", kind=kind.value, user_id=str(parsed.user_id))
            raise InvalidTokenError()
        user_id = _matching_user_id(stored_user_id, parsed.user_id)
        logger.info("One-time token consumed", kind=kind.value, user_id=str(user_id))
        return user_id

    def duration(self, kind: TokenKind) -> timedelta:
        if kind not in ONE_TIME_KINDS:
            raise ValueError(f"{kind.value} is not a one-time token kind")
        return self.one_time_durations[kind]

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    @staticmethod
    def _access_key(user_id: UUID, token_id: UUID) -> str:
        return f"access_token:{user_id}:{token_id}"

    @staticmethod
    def _one_time_key(kind: TokenKind, token_hash: str) -> str:
        return f"one_time:{kind.value}:{token_hash}"

    @staticmethod
    def _owner_key(kind: TokenKind, user_id: UUID) -> str:
        return f"one_time_owner:{kind.value}:{user_id}"


def _seconds(duration: timedelta) -> int:
    return max(int(duration.total_seconds()), 1)


def _matching_user_id(stored: str, claimed: UUID) -> UUID:
    try:
        stored_id = UUID(stored)
    except ValueError:
        raise InvalidTokenError()
    if stored_id != claimed:
        raise InvalidTokenError()
    return stored_id
