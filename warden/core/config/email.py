"""Mailer configuration settings.

Outgoing mail is delivered through SMTP by fastapi-mail. Outside production
every message is redirected to ``MAILER_DEBUG_TO``.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings

_DEFAULT_TEMPLATES_DIR = str(Path(__file__).resolve().parents[2] / "templates" / "email")


class EmailSettings(BaseSettings):
    """Mailer settings.

    Attributes:
        SMTP_HOST: SMTP server hostname
        SMTP_PORT: SMTP server port (587 for STARTTLS, 465 for SSL)
        SMTP_USERNAME: SMTP authentication username
        SMTP_PASSWORD: SMTP authentication password (SecretStr)
        MAILER_FROM: Sender address
        MAILER_DEBUG_TO: Recipient of every message outside production
        MAILER_BASE_URL: Frontend base URL used to build links in emails
        MAILER_TEMPLATES_DIR: Directory containing Jinja2 email templates
    """

    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = Field(default=587, ge=1, le=65535)
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[SecretStr] = None
    SMTP_USE_STARTTLS: bool = True
    SMTP_USE_SSL: bool = False

    MAILER_FROM: str = "no-reply@example.com"
    MAILER_FROM_NAME: str = "warden"
    MAILER_DEBUG_TO: str = "debug@example.com"
    MAILER_BASE_URL: str = "http://localhost:3000"
    MAILER_TEMPLATES_DIR: str = _DEFAULT_TEMPLATES_DIR
