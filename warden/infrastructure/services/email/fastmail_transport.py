"""SMTP mail transport built on fastapi-mail."""

from typing import Sequence

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType
from structlog import get_logger

from warden.core.config.settings import Settings
from warden.domain.interfaces.mail import IMailTransport

logger = get_logger(__name__)


def build_connection_config(settings: Settings) -> ConnectionConfig:
    return ConnectionConfig(
        MAIL_USERNAME=settings.SMTP_USERNAME or "",
        MAIL_PASSWORD=settings.SMTP_PASSWORD.get_secret_value() if settings.SMTP_PASSWORD else "",
        MAIL_FROM=settings.MAILER_FROM,
        MAIL_FROM_NAME=settings.MAILER_FROM_NAME,
        MAIL_PORT=settings.SMTP_PORT,
        MAIL_SERVER=settings.SMTP_HOST,
        MAIL_STARTTLS=settings.SMTP_USE_STARTTLS,
        MAIL_SSL_TLS=settings.SMTP_USE_SSL,
        USE_CREDENTIALS=bool(settings.SMTP_USERNAME and settings.SMTP_PASSWORD),
        VALIDATE_CERTS=True,
    )


class FastMailTransport(IMailTransport):
    def __init__(self, config: ConnectionConfig):
        self.fastmail = FastMail(config)

    async def send(self, to: Sequence[str], subject: str, html_body: str) -> None:
        message = MessageSchema(
            subject=subject,
            recipients=list(to),
            body=html_body,
            subtype=MessageType.html,
        )
        await self.fastmail.send_message(message)
        logger.debug("SMTP message handed off", recipient_count=len(to))
