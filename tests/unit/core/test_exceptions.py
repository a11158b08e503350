import pytest

from warden.core.exceptions import (
    BadRequestError,
    InvalidCredentialsError,
    InvalidTokenError,
    PasswordsNotMatchError,
    RateLimitExceededError,
    UnauthorizedError,
    ValidationError,
    WardenError,
)
from warden.core.handlers import status_for


class TestWardenErrors:
    def test_message_and_code_defaults(self):
        exc = InvalidTokenError()

        assert str(exc) == "invalid token"
        assert exc.code == "invalid_token"
        assert isinstance(exc, UnauthorizedError)
        assert isinstance(exc, WardenError)

    def test_custom_message_is_kept(self):
        exc = BadRequestError("avatar must not exceed 5 MiB")

        assert exc.message == "avatar must not exceed 5 MiB"
        assert exc.code == "bad_request"

    def test_validation_errors_are_bad_requests(self):
        assert issubclass(PasswordsNotMatchError, ValidationError)
        assert issubclass(ValidationError, BadRequestError)

    def test_rate_limit_error_carries_window(self):
        exc = RateLimitExceededError(retry_after=42, limit=1)

        assert exc.retry_after == 42
        assert exc.limit == 1

    @pytest.mark.parametrize(
        "exc, expected",
        [
            (InvalidCredentialsError(), 401),
            (PasswordsNotMatchError(), 400),
            (RateLimitExceededError(), 429),
            (WardenError("boom"), 500),
        ],
    )
    def test_status_mapping(self, exc, expected):
        assert status_for(exc) == expected
