"""Authentication settings: access-token signing and token lifetimes.
"""

import logging
from datetime import timedelta

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

MIN_SIGNATURE_BYTES = 32
MIN_BCRYPT_COST = 10


class AuthSettings(BaseSettings):
    """Defines settings for access tokens, one-time tokens and password hashing.

    Security Note:
        - ACCESS_TOKEN_SIGNATURE is the HMAC key for access tokens; it must be
          at least 32 bytes and must never be logged or committed.
        - BCRYPT_COST below 10 is refused.
    """

    ACCESS_TOKEN_SIGNATURE: SecretStr
    ACCESS_TOKEN_DURATION_MINUTES: int = Field(ge=1, default=15)

    PASSWORD_RESET_TOKEN_DURATION_MINUTES: int = Field(ge=1, default=15)
    EMAIL_VERIFICATION_TOKEN_DURATION_MINUTES: int = Field(ge=1, default=24 * 60)

    BCRYPT_COST: int = Field(default=MIN_BCRYPT_COST, le=31)

    @field_validator("ACCESS_TOKEN_SIGNATURE")
    @classmethod
    def validate_signature_length(cls, value: SecretStr) -> SecretStr:
        """Refuses signing keys shorter than 32 bytes."""
        if len(value.get_secret_value().encode("utf-8")) < MIN_SIGNATURE_BYTES:
            logger.error("ACCESS_TOKEN_SIGNATURE is too short.")
            raise ValueError(
                f"ACCESS_TOKEN_SIGNATURE must be at least {MIN_SIGNATURE_BYTES} bytes"
            )
        return value

    @field_validator("BCRYPT_COST")
    @classmethod
    def validate_bcrypt_cost(cls, value: int) -> int:
        if value < MIN_BCRYPT_COST:
            raise ValueError(f"BCRYPT_COST must be at least {MIN_BCRYPT_COST}")
        return value

    @property
    def access_token_duration(self) -> timedelta:
        return timedelta(minutes=self.ACCESS_TOKEN_DURATION_MINUTES)

    @property
    def password_reset_token_duration(self) -> timedelta:
        return timedelta(minutes=self.PASSWORD_RESET_TOKEN_DURATION_MINUTES)

    @property
    def email_verification_token_duration(self) -> timedelta:
        return timedelta(minutes=self.EMAIL_VERIFICATION_TOKEN_DURATION_MINUTES)
