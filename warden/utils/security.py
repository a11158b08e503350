"""Password hashing.

bcrypt via passlib's ``CryptContext``. Hashing and verification are
CPU-bound and run synchronously on purpose.
"""

import structlog
from passlib.context import CryptContext

from warden.core.exceptions import InternalError, InvalidCredentialsError

logger = structlog.get_logger(__name__)

# Reference plaintext behind ``PasswordHasher.dummy_hash``; never a real password.
_DUMMY_PASSWORD = "warden-timing-equalization"


class PasswordHasher:
    """One-way password hashing with constant-time verification.

    Attributes:
        dummy_hash: A precomputed hash at the configured cost. Login verifies
            against it when the username is unknown so that both failure
            paths cost one bcrypt verification.
    """

    def __init__(self, cost: int):
        self.pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=cost)
        self.dummy_hash = self.pwd_context.hash(_DUMMY_PASSWORD)

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt.

        Raises:
            InternalError: If the backend refuses the input.
        """
        try:
            return self.pwd_context.hash(password)
        except (ValueError, TypeError) as e:
            logger.error("Password hashing failed", error_type=type(e).__name__)
            raise InternalError() from e

    def verify(self, password: str, hashed_password: str | None) -> None:
        """Verify a password against its hash.

        Raises:
            InvalidCredentialsError: On mismatch, or when the hash is missing
                or malformed.
        """
        try:
            matches = self.pwd_context.verify(password, hashed_password or self.dummy_hash)
        except (ValueError, TypeError):
            matches = False
        if not matches or hashed_password is None:
            raise InvalidCredentialsError()
