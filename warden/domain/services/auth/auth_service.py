"""Authentication service: login, registration, logout and password reset.

Login never tells an unknown username apart from a wrong password: both
raise ``InvalidCredentialsError`` after exactly one bcrypt verification.
"""

from dataclasses import dataclass
from uuid import UUID

from structlog import get_logger

from warden.core.exceptions import InvalidCredentialsError, MailerError, UserNotFoundError
from warden.core.logging import mask_email
from warden.domain.entities.user import User, UserDraft
from warden.domain.services.auth.token import TokenService
from warden.domain.services.email.mailer_service import MailerService
from warden.domain.services.users.user_service import UserService
from warden.domain.validation import user_rules
from warden.domain.value_objects.tokens import TokenKind
from warden.utils.security import PasswordHasher

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthResult:
    user: User
    access_token: str


class AuthService:
    def __init__(
        self,
        user_service: UserService,
        token_service: TokenService,
        mailer: MailerService,
        hasher: PasswordHasher,
    ):
        self.user_service = user_service
        self.token_service = token_service
        self.mailer = mailer
        self.hasher = hasher

    async def login(self, username: str, password: str) -> AuthResult:
        """Authenticate a username/password pair and open a session.

        Args:
            username: Trimmed before lookup; compared case-insensitively.
            password: Used verbatim.

        Raises:
            InvalidCredentialsError: For an unknown user or a wrong password.
        """
        try:
            user = await self.user_service.get_by_username((username or "").strip())
        except UserNotFoundError:
            # Same bcrypt cost as the known-user path.
            try:
                self.hasher.verify(password or "", self.hasher.dummy_hash)
            except InvalidCredentialsError:
                pass
            logger.info("Login failed")
            raise InvalidCredentialsError()

        try:
            self.hasher.verify(password or "", user.hashed_password)
        except InvalidCredentialsError:
            logger.info("Login failed")
            raise

        token = await self.token_service.generate_access_token(user.id)
        logger.info("Login succeeded", user_id=str(user.id))
        return AuthResult(user=user, access_token=token)

    async def register(self, draft: UserDraft) -> AuthResult:
        """Create the user, send the verification email and open a session.

        A failed verification email does not undo the registration; the
        user can ask for it again.
        """
        user = await self.user_service.register(draft)
        try:
            await self.user_service.send_email_verification(user)
        except MailerError:
            logger.warning("Verification email not sent after registration", user_id=str(user.id))
        token = await self.token_service.generate_access_token(user.id)
        return AuthResult(user=user, access_token=token)

    async def logout(self, token: str) -> None:
        await self.token_service.revoke_access_token(token)

    async def send_password_reset_email(self, email: str) -> None:
        """Email a reset link if ``email`` belongs to a verified user.

        Succeeds silently for unknown or unverified addresses.
        """
        email = (email or "").strip()
        user_id = await self.user_service.get_id_by_verified_email(email) if email else None
        if user_id is None:
            logger.info("Password reset requested for unknown email", email=mask_email(email))
            return

        user = await self.user_service.get_by_id(user_id)
        kind = TokenKind.PASSWORD_RESET
        token = await self.token_service.generate_one_time_token(kind, user_id)
        await self.mailer.send_reset_password(user, token, self.token_service.duration(kind))
        logger.info("Password reset email sent", user_id=str(user_id))

    async def verify_password_reset_token(self, token: str) -> UUID:
        """Check that a reset link is live without using it up."""
        return await self.token_service.verify_one_time_token(TokenKind.PASSWORD_RESET, token)

    async def reset_password(self, token: str, password: str, password_confirmation: str) -> None:
        """Set a new password through a reset token.

        The token is consumed first and stays used even if validation or
        the update fails afterwards.

        Raises:
            InvalidTokenError: If the token is not live.
            ValidationError: If the new password is rejected.
        """
        user_id = await self.token_service.consume_one_time_token(TokenKind.PASSWORD_RESET, token)
        password = user_rules.validate_password_confirmation(password, password_confirmation)
        await self.user_service.set_password(user_id, password)
        logger.info("Password reset completed", user_id=str(user_id))
