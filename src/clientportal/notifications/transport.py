"""Mail transports used by the notification gateway.

``SmtpTransport`` delivers through an SMTP server with ``smtplib``.
``LoggingTransport`` stands in when no credentials are configured and only
records what would have been sent.
"""

from __future__ import annotations

import smtplib
import time
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import Protocol

from clientportal.config import MailConfig
from clientportal.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class MailMessage:
    """A rendered message ready for delivery."""

    to: str
    subject: str
    html: str
    text: str


class MailTransport(Protocol):
    """Anything that can deliver a MailMessage and return its message id.

    Implementations are synchronous; the gateway runs them in a worker thread.
    """

    def send(self, message: MailMessage) -> str: ...


class SmtpTransport:
    """Deliver messages through an authenticated SMTP session."""

    def __init__(self, config: MailConfig) -> None:
        self.config = config

    def build(self, message: MailMessage) -> EmailMessage:
        """Build the multipart/alternative MIME message."""
        email = EmailMessage()
        email["From"] = formataddr((self.config.sender_name, self.config.from_address))
        email["To"] = message.to
        email["Subject"] = message.subject
        domain = self.config.from_address.rpartition("@")[2] or None
        email["Message-ID"] = make_msgid(domain=domain)
        email.set_content(message.text)
        email.add_alternative(message.html, subtype="html")
        return email

    def send(self, message: MailMessage) -> str:
        email = self.build(message)
        password = self.config.password.get_secret_value() if self.config.password else ""

        with smtplib.SMTP(
            self.config.smtp_host,
            self.config.smtp_port,
            timeout=self.config.timeout_seconds,
        ) as smtp:
            if self.config.use_starttls:
                smtp.starttls()
            smtp.login(self.config.username or "", password)
            smtp.send_message(email)

        return str(email["Message-ID"])


class LoggingTransport:
    """Record messages in the log instead of sending them."""

    def send(self, message: MailMessage) -> str:
        logger.info(
            "email_not_sent_no_credentials",
            to=message.to,
            subject=message.subject,
        )
        return f"dev-{int(time.time() * 1000)}"


def transport_from_config(config: MailConfig) -> MailTransport:
    """Pick the SMTP transport when credentials exist, else the logging one."""
    if config.is_configured:
        return SmtpTransport(config)
    logger.warning("mail_credentials_missing", smtp_host=config.smtp_host)
    return LoggingTransport()
