"""Client notification gateway.

Sends the "your project dashboard is ready" email. Delivery problems are
logged and reported in the returned NotificationResult; they never raise,
so a failing mail server cannot fail the operation that triggered the email.
"""

from __future__ import annotations

import asyncio
import smtplib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from clientportal.config import FrontendConfig, MailConfig
from clientportal.logging import get_logger
from clientportal.notifications.transport import (
    MailMessage,
    MailTransport,
    transport_from_config,
)

logger = get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"


@dataclass(frozen=True)
class NotificationResult:
    """Outcome of a notification attempt."""

    success: bool
    message_id: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "message_id": self.message_id, "error": self.error}


class NotificationGateway:
    """Render and send client notification emails.

    Attributes:
        frontend: Frontend configuration used to build dashboard links.
        transport: Mail transport used for delivery.
        env: Jinja2 environment holding the email templates.
    """

    def __init__(
        self,
        frontend: FrontendConfig,
        transport: MailTransport,
        template_dir: Path | None = None,
    ) -> None:
        self.frontend = frontend
        self.transport = transport
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir or TEMPLATE_DIR)),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    @classmethod
    def from_config(cls, mail: MailConfig, frontend: FrontendConfig) -> NotificationGateway:
        return cls(frontend=frontend, transport=transport_from_config(mail))

    def dashboard_url(self, project_id: str) -> str:
        """Client dashboard address for a project."""
        return f"{self.frontend.base_url}/client/{project_id}/dashboard"

    def render_dashboard_ready(
        self,
        client_email: str,
        client_name: str,
        project_id: str,
        project_name: str,
    ) -> MailMessage:
        """Render the dashboard-ready email without sending it."""
        context = {
            "client_name": client_name,
            "project_name": project_name,
            "dashboard_url": self.dashboard_url(project_id),
        }
        return MailMessage(
            to=client_email,
            subject=f"Your Project Dashboard: {project_name}",
            html=self.env.get_template("dashboard_ready.html").render(**context),
            text=self.env.get_template("dashboard_ready.txt").render(**context),
        )

    async def notify_client_dashboard_ready(
        self,
        client_email: str,
        client_name: str,
        project_id: str,
        project_name: str,
    ) -> NotificationResult:
        """Email the client a link to their project dashboard.

        Args:
            client_email: Recipient address.
            client_name: Name used in the greeting.
            project_id: Project identifier used in the dashboard link.
            project_name: Project name shown in subject and body.

        Returns:
            NotificationResult with the message id, or the error on failure.
        """
        message = self.render_dashboard_ready(client_email, client_name, project_id, project_name)

        logger.info(
            "dashboard_email_prepared",
            project_id=project_id,
            to=client_email,
            dashboard_url=self.dashboard_url(project_id),
        )

        try:
            message_id = await asyncio.to_thread(self.transport.send, message)
        except smtplib.SMTPAuthenticationError as exc:
            logger.error(
                "dashboard_email_failed",
                project_id=project_id,
                to=client_email,
                error=str(exc),
                hint="SMTP authentication failed; check the mail credentials",
            )
            return NotificationResult(success=False, error=str(exc))
        except (smtplib.SMTPException, OSError, ValueError) as exc:
            # ValueError: the address cannot be written into a mail header
            logger.error(
                "dashboard_email_failed",
                project_id=project_id,
                to=client_email,
                error=str(exc),
            )
            return NotificationResult(success=False, error=str(exc))

        logger.info(
            "dashboard_email_sent",
            project_id=project_id,
            to=client_email,
            message_id=message_id,
        )
        return NotificationResult(success=True, message_id=message_id)
