"""Client notifications: dashboard-ready email and its mail transports."""

from __future__ import annotations

from clientportal.notifications.gateway import NotificationGateway, NotificationResult
from clientportal.notifications.transport import (
    LoggingTransport,
    MailMessage,
    MailTransport,
    SmtpTransport,
    transport_from_config,
)

__all__ = [
    "NotificationGateway",
    "NotificationResult",
    "LoggingTransport",
    "MailMessage",
    "MailTransport",
    "SmtpTransport",
    "transport_from_config",
]
