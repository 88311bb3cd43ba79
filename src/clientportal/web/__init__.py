"""Web interface for the client portal.

FastAPI application exposing the project lifecycle and invoice views as a
JSON API with a uniform response envelope.
"""

from __future__ import annotations

from clientportal.web.app import create_app
from clientportal.web.middleware import RequestLoggingMiddleware

__all__ = [
    "create_app",
    "RequestLoggingMiddleware",
]
