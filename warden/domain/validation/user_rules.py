"""Validation rules for user input.

These run inside the services regardless of what the transport layer has
already checked, so seeding scripts and admin tooling get the same rules.
Each rule returns the normalized value or raises the matching
``ValidationError`` subclass.
"""

import re

from warden.core.exceptions import (
    EmailInvalidError,
    EmailRequiredError,
    NameRequiredError,
    NameTooLongError,
    PasswordConfirmationRequiredError,
    PasswordRequiredError,
    PasswordsNotMatchError,
    PasswordTooShortError,
    UsernameInvalidError,
    UsernameRequiredError,
    UsernameTooLongError,
    UsernameTooShortError,
)

NAME_MAX_LENGTH = 50
USERNAME_MIN_LENGTH = 4
USERNAME_MAX_LENGTH = 15
PASSWORD_MIN_BYTES = 8
EMAIL_MAX_LENGTH = 254

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9.+_-]+@[A-Za-z0-9.+_-]+$")


def validate_name(name: str | None) -> str:
    name = (name or "").strip()
    if not name:
        raise NameRequiredError()
    if len(name) > NAME_MAX_LENGTH:
        raise NameTooLongError()
    return name


def validate_username(username: str | None) -> str:
    """Trims and checks a username. Case is preserved."""
    username = (username or "").strip()
    if not username:
        raise UsernameRequiredError()
    if len(username) < USERNAME_MIN_LENGTH:
        raise UsernameTooShortError()
    if len(username) > USERNAME_MAX_LENGTH:
        raise UsernameTooLongError()
    if not USERNAME_PATTERN.match(username):
        raise UsernameInvalidError()
    return username


def validate_password(password: str | None) -> str:
    """Passwords are never trimmed; length is counted in UTF-8 bytes."""
    if not password:
        raise PasswordRequiredError()
    if len(password.encode("utf-8")) < PASSWORD_MIN_BYTES:
        raise PasswordTooShortError()
    return password


def validate_password_confirmation(password: str | None, confirmation: str | None) -> str:
    password = validate_password(password)
    if not confirmation:
        raise PasswordConfirmationRequiredError()
    if password != confirmation:
        raise PasswordsNotMatchError()
    return password


def validate_email(email: str | None) -> str:
    email = (email or "").strip()
    if not email:
        raise EmailRequiredError()
    if len(email) > EMAIL_MAX_LENGTH or not EMAIL_PATTERN.match(email):
        raise EmailInvalidError()
    return email
