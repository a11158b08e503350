"""Structured exception hierarchy for warden.

Every domain error carries a machine-readable ``code`` and a human-readable
``message``. Services raise these exceptions and never deal with transport
concerns; the HTTP layer maps each family to a status code exactly once
(see :mod:`warden.core.handlers`).

The hierarchy mirrors the failure families of the service:

- generic failures (internal, bad request, unauthorized, forbidden);
- credential and token failures;
- user lookup and uniqueness failures;
- input validation failures, one class per rule;
- gateway failures (cache miss, mailer, file upload, rate limit).
"""

from __future__ import annotations

from typing import Final

__all__: Final = [
    "WardenError",
    "InternalError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "UserNotFoundError",
    "InvalidUserIdError",
    "UsernameConflictError",
    "EmailConflictError",
    "EmailAlreadyVerifiedError",
    "ValidationError",
    "NameRequiredError",
    "NameTooLongError",
    "UsernameRequiredError",
    "UsernameTooShortError",
    "UsernameTooLongError",
    "UsernameInvalidError",
    "PasswordRequiredError",
    "PasswordTooShortError",
    "PasswordConfirmationRequiredError",
    "PasswordsNotMatchError",
    "EmailRequiredError",
    "EmailInvalidError",
    "CacheNotFoundError",
    "MailerError",
    "FileUploadError",
    "RateLimitExceededError",
]


class WardenError(Exception):
    """Base exception class for all custom errors in warden.

    Attributes:
        message (str): A human-readable error message, safe to show to clients.
        code (str): A unique, machine-readable error code.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Generic errors
# ---------------------------------------------------------------------------


class InternalError(WardenError):
    """Raised when a collaborator fails unexpectedly.

    The original exception has already been reported to the error tracker by
    the time this is raised; the message is generic.
    """

    def __init__(self, message: str = "internal error", code: str = "internal_error"):
        super().__init__(message, code)


class BadRequestError(WardenError):
    def __init__(self, message: str = "bad request", code: str = "bad_request"):
        super().__init__(message, code)


class UnauthorizedError(WardenError):
    def __init__(self, message: str = "unauthorized", code: str = "unauthorized"):
        super().__init__(message, code)


class ForbiddenError(WardenError):
    """Raised when an authenticated user lacks the role for an action."""

    def __init__(self, message: str = "forbidden", code: str = "forbidden"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Credential / token errors (map to 401 Unauthorized)
# ---------------------------------------------------------------------------


class InvalidCredentialsError(UnauthorizedError):
    """Raised when a username/password pair does not authenticate.

    The same error is raised for an unknown username and for a wrong
    password so that callers cannot enumerate accounts.
    """

    def __init__(
        self, message: str = "invalid credentials", code: str = "invalid_credentials"
    ):
        super().__init__(message, code)


class InvalidTokenError(UnauthorizedError):
    """Raised for malformed, expired, revoked, consumed or mistyped tokens."""

    def __init__(self, message: str = "invalid token", code: str = "invalid_token"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# User errors
# ---------------------------------------------------------------------------


class UserNotFoundError(WardenError):
    def __init__(self, message: str = "user not found", code: str = "user_not_found"):
        super().__init__(message, code)


class InvalidUserIdError(BadRequestError):
    def __init__(self, message: str = "invalid user id", code: str = "invalid_user_id"):
        super().__init__(message, code)


class UsernameConflictError(WardenError):
    """Raised when a username is already taken (compared case-insensitively)."""

    def __init__(
        self, message: str = "username already taken", code: str = "username_conflict"
    ):
        super().__init__(message, code)


class EmailConflictError(WardenError):
    """Raised when another user already owns the email as a verified address."""

    def __init__(self, message: str = "email already taken", code: str = "email_conflict"):
        super().__init__(message, code)


class EmailAlreadyVerifiedError(BadRequestError):
    def __init__(
        self, message: str = "email already verified", code: str = "email_already_verified"
    ):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Validation errors (map to 400 Bad Request)
# ---------------------------------------------------------------------------


class ValidationError(BadRequestError):
    """Base class for input validation failures raised by the user rules."""

    def __init__(self, message: str = "validation error", code: str = "validation_error"):
        super().__init__(message, code)


class NameRequiredError(ValidationError):
    def __init__(self, message: str = "name is required", code: str = "name_required"):
        super().__init__(message, code)


class NameTooLongError(ValidationError):
    def __init__(
        self, message: str = "name must be at most 50 characters", code: str = "name_too_long"
    ):
        super().__init__(message, code)


class UsernameRequiredError(ValidationError):
    def __init__(self, message: str = "username is required", code: str = "username_required"):
        super().__init__(message, code)


class UsernameTooShortError(ValidationError):
    def __init__(
        self,
        message: str = "username must be at least 4 characters",
        code: str = "username_too_short",
    ):
        super().__init__(message, code)


class UsernameTooLongError(ValidationError):
    def __init__(
        self,
        message: str = "username must be at most 15 characters",
        code: str = "username_too_long",
    ):
        super().__init__(message, code)


class UsernameInvalidError(ValidationError):
    def __init__(
        self,
        message: str = "username may only contain letters, digits and underscores",
        code: str = "username_invalid",
    ):
        super().__init__(message, code)


class PasswordRequiredError(ValidationError):
    def __init__(self, message: str = "password is required", code: str = "password_required"):
        super().__init__(message, code)


class PasswordTooShortError(ValidationError):
    def __init__(
        self,
        message: str = "password must be at least 8 characters",
        code: str = "password_too_short",
    ):
        super().__init__(message, code)


class PasswordConfirmationRequiredError(ValidationError):
    def __init__(
        self,
        message: str = "password confirmation is required",
        code: str = "password_confirmation_required",
    ):
        super().__init__(message, code)


class PasswordsNotMatchError(ValidationError):
    def __init__(
        self, message: str = "passwords do not match", code: str = "passwords_not_match"
    ):
        super().__init__(message, code)


class EmailRequiredError(ValidationError):
    def __init__(self, message: str = "email is required", code: str = "email_required"):
        super().__init__(message, code)


class EmailInvalidError(ValidationError):
    def __init__(self, message: str = "email is invalid", code: str = "email_invalid"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Gateway errors
# ---------------------------------------------------------------------------


class CacheNotFoundError(WardenError):
    """Raised by the cache gateway on a missing key.

    Services translate it before it leaves them; it never reaches a client.
    """

    def __init__(self, message: str = "cache key not found", code: str = "cache_not_found"):
        super().__init__(message, code)


class MailerError(WardenError):
    def __init__(self, message: str = "failed to send email", code: str = "mailer_error"):
        super().__init__(message, code)


class FileUploadError(WardenError):
    def __init__(self, message: str = "failed to upload file", code: str = "file_upload_error"):
        super().__init__(message, code)


class RateLimitExceededError(WardenError):
    """Raised when a client exceeds a rate limit.

    Attributes:
        retry_after (int): Seconds until the current window resets.
        limit (int): Requests allowed per window.
    """

    def __init__(
        self,
        message: str = "rate limit exceeded",
        code: str = "rate_limit_exceeded",
        retry_after: int = 0,
        limit: int = 0,
    ):
        super().__init__(message, code)
        self.retry_after = retry_after
        self.limit = limit
