"""Mailer service: renders the email templates and hands messages to the transport.

Outside production every message is redirected to the debug address, the
subject gets a ``[DEBUG] `` prefix and the body lists the original
recipients. Transport failures are reported to the error tracker and raised
as ``MailerError``.
"""

from datetime import timedelta
from pathlib import Path
from typing import Any, Sequence

from jinja2 import Environment, FileSystemLoader, TemplateError
from structlog import get_logger

from warden.core.exceptions import MailerError
from warden.core.logging import mask_email
from warden.domain.entities.user import User
from warden.domain.interfaces.error_tracking import IErrorTracker
from warden.domain.interfaces.mail import IMailTransport

logger = get_logger(__name__)

DEBUG_SUBJECT_PREFIX = "[DEBUG] "


def humanize_duration(duration: timedelta) -> str:
    """``timedelta(minutes=15)`` -> ``"15 minutes"``; picks the largest whole unit."""
    seconds = int(duration.total_seconds())
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size and seconds % size == 0:
            count = seconds // size
            return f"{count} {unit}" + ("s" if count != 1 else "")
    return f"{seconds} second" + ("s" if seconds != 1 else "")


class MailerService:
    def __init__(
        self,
        transport: IMailTransport,
        error_tracker: IErrorTracker,
        *,
        templates_dir: str,
        base_url: str,
        debug_to: str,
        production: bool,
    ):
        self.transport = transport
        self.error_tracker = error_tracker
        self.base_url = base_url.rstrip("/")
        self.debug_to = debug_to
        self.production = production
        self.jinja_env = Environment(
            loader=FileSystemLoader(str(Path(templates_dir))),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render_template(self, template_name: str, **context: Any) -> str:
        """Render an email template.

        Raises:
            MailerError: If the template is missing or fails to render.
        """
        try:
            return self.jinja_env.get_template(template_name).render(**context)
        except TemplateError as e:
            logger.error("Template rendering failed", template=template_name, error=str(e))
            self.error_tracker.capture_exception(e, template=template_name)
            raise MailerError() from e

    async def send(self, to: Sequence[str], subject: str, body: str) -> None:
        """Send one HTML message.

        Raises:
            MailerError: If there are no recipients or the transport fails.
        """
        recipients = [address for address in to if address]
        if not recipients:
            raise MailerError("no recipients")

        if not self.production:
            subject = DEBUG_SUBJECT_PREFIX + subject
            body = f"{body}<br>This message was initially addressed to:<br>{', '.join(recipients)}"
            recipients = [self.debug_to]

        try:
            await self.transport.send(recipients, subject, body)
        except Exception as e:  # noqa: BLE001 - any transport failure is a mailer failure
            logger.error(
                "Failed to send email",
                recipients=[mask_email(r) for r in recipients],
                subject=subject,
                error=str(e),
            )
            self.error_tracker.capture_exception(e, subject=subject)
            raise MailerError() from e

        logger.info("Email sent", recipients=[mask_email(r) for r in recipients], subject=subject)

    async def send_hello(self, user: User) -> None:
        body = self.render_template("hello.html", name=user.name)
        await self.send([user.email], "Hello", body)

    async def send_verify_email(self, user: User, token: str, ttl: timedelta) -> None:
        link = f"{self.base_url}/users/me/email/verify/{token}"
        body = self.render_template(
            "verify_email.html", name=user.name, link=link, ttl=humanize_duration(ttl)
        )
        await self.send([user.email], "Verify your email", body)

    async def send_reset_password(self, user: User, token: str, ttl: timedelta) -> None:
        link = f"{self.base_url}/users/me/password/reset/{token}"
        body = self.render_template(
            "reset_password.html", name=user.name, link=link, ttl=humanize_duration(ttl)
        )
        await self.send([user.email], "Reset your password", body)
