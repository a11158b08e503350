import pytest

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
from warden.domain.validation import user_rules


class TestNameRules:
    def test_trims_and_accepts(self):
        assert user_rules.validate_name("  John Doe ") == "John Doe"

    def test_counts_code_points(self):
        assert user_rules.validate_name("é" * 50) == "é" * 50

    @pytest.mark.parametrize(
        "name, error",
        [("", NameRequiredError), ("   ", NameRequiredError), ("x" * 51, NameTooLongError)],
    )
    def test_rejects(self, name, error):
        with pytest.raises(error):
            user_rules.validate_name(name)


class TestUsernameRules:
    def test_preserves_case_and_trims(self):
        assert user_rules.validate_username("  John_99 ") == "John_99"

    @pytest.mark.parametrize(
        "username, error",
        [
            ("", UsernameRequiredError),
            ("abc", UsernameTooShortError),
            ("a" * 16, UsernameTooLongError),
            ("john-doe", UsernameInvalidError),
            ("jöhn", UsernameInvalidError),
            ("john doe", UsernameInvalidError),
        ],
    )
    def test_rejects(self, username, error):
        with pytest.raises(error):
            user_rules.validate_username(username)


class TestPasswordRules:
    def test_not_trimmed(self):
        assert user_rules.validate_password(" secret1 ") == " secret1 "

    def test_length_counted_in_bytes(self):
        # four two-byte characters
        assert user_rules.validate_password("éééé") == "éééé"

    @pytest.mark.parametrize(
        "password, error", [("", PasswordRequiredError), ("short12", PasswordTooShortError)]
    )
    def test_rejects(self, password, error):
        with pytest.raises(error):
            user_rules.validate_password(password)

    def test_confirmation_required(self):
        with pytest.raises(PasswordConfirmationRequiredError):
            user_rules.validate_password_confirmation("newpass12", "")

    def test_confirmation_must_match(self):
        with pytest.raises(PasswordsNotMatchError):
            user_rules.validate_password_confirmation("newpass12", "newpass13")


class TestEmailRules:
    def test_accepts(self):
        assert user_rules.validate_email(" john+tag@example.com ") == "john+tag@example.com"

    @pytest.mark.parametrize(
        "email, error",
        [
            ("", EmailRequiredError),
            ("john.example.com", EmailInvalidError),
            ("john@exa mple.com", EmailInvalidError),
            ("a" * 250 + "@x.io", EmailInvalidError),
        ],
    )
    def test_rejects(self, email, error):
        with pytest.raises(error):
            user_rules.validate_email(email)
