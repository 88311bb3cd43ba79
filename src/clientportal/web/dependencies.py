"""FastAPI dependencies shared by the route modules.

Services are built per request from the session factory and notifier held
in ``app.state``, so tests can swap either one before issuing requests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Header, Request

from clientportal.invoices.aggregation import InvoiceAggregationService
from clientportal.lifecycle.service import AuthIdentity, ProjectLifecycleService

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    """Dependency that retrieves session factory from app state."""
    return request.app.state.session_factory  # type: ignore[no-any-return]


def get_lifecycle_service(request: Request) -> ProjectLifecycleService:
    return ProjectLifecycleService(
        session_factory=request.app.state.session_factory,
        notifier=getattr(request.app.state, "notifier", None),
    )


def get_invoice_service(request: Request) -> InvoiceAggregationService:
    return InvoiceAggregationService(request.app.state.session_factory)


def get_identity(
    x_user_email: str | None = Header(default=None),
    x_user_id: str | None = Header(default=None),
) -> AuthIdentity:
    """Identity forwarded by the upstream auth gateway.

    Missing headers yield an empty identity; operations that need a user
    raise AuthError themselves.
    """
    return AuthIdentity(
        email=(x_user_email or "").strip() or None,
        user_id=(x_user_id or "").strip() or None,
    )
