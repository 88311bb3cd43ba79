"""Pytest fixtures for integration tests.

Provides async database fixtures for exercising the store, the services and
the HTTP API against an in-memory SQLite database. Production runs on
PostgreSQL; the models avoid server-side defaults so both behave alike here.
Row locks (SELECT ... FOR UPDATE) are silently ignored by SQLite.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from clientportal.config import FrontendConfig
from clientportal.database.models import Base, Collaborator, Project, Service
from clientportal.database.models.project import (
    InvoiceStatus,
    InvoiceType,
    PaymentStatus,
    ProjectType,
)
from clientportal.invoices.aggregation import InvoiceAggregationService
from clientportal.lifecycle.service import ProjectLifecycleService
from clientportal.notifications.gateway import NotificationGateway
from clientportal.notifications.transport import MailMessage
from clientportal.web.app import create_app


class RecordingTransport:
    """Mail transport double that records messages instead of sending them."""

    def __init__(self) -> None:
        self.sent: list[MailMessage] = []

    def send(self, message: MailMessage) -> str:
        self.sent.append(message)
        return f"<test-{len(self.sent)}@example.com>"


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine shared by every connection of a test."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Session for query-level tests; rolled back after the test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def notifier(transport: RecordingTransport) -> NotificationGateway:
    return NotificationGateway(FrontendConfig(base_url="https://portal.example.com"), transport)


@pytest.fixture
def lifecycle(
    session_factory: async_sessionmaker[AsyncSession],
    notifier: NotificationGateway,
) -> ProjectLifecycleService:
    return ProjectLifecycleService(session_factory, notifier)


@pytest.fixture
def invoices(session_factory: async_sessionmaker[AsyncSession]) -> InvoiceAggregationService:
    return InvoiceAggregationService(session_factory)


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    notifier: NotificationGateway,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the app, wired to the test database and mail transport."""
    app = create_app()
    app.state.session_factory = session_factory
    app.state.notifier = notifier
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def seed(session_factory: async_sessionmaker[AsyncSession]) -> Seeder:
    return Seeder(session_factory)


class Seeder:
    """Insert rows directly, bypassing the services, to set up scenarios."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def add(self, instance: Any) -> Any:
        async with self.session_factory() as session, session.begin():
            session.add(instance)
        return instance

    async def project(self, **fields: Any) -> Project:
        values: dict[str, Any] = {
            "name": "Logo Design",
            "project_type": ProjectType.simple,
            "client_name": "Ada",
            "client_email": "ada@example.com",
            "status": "pending",
            "payment_status": PaymentStatus.pending,
        }
        values.update(fields)
        return await self.add(Project(**values))

    async def paid_project(self, **fields: Any) -> Project:
        fields.setdefault("payment_status", PaymentStatus.paid)
        return await self.project(**fields)

    async def collaborator(self, first_name: str = "Jane", last_name: str = "Doe") -> Collaborator:
        return await self.add(
            Collaborator(first_name=first_name, last_name=last_name, email="jane@example.com")
        )

    async def service(self, name: str = "Logo Package", price: str = "250") -> Service:
        return await self.add(Service(name=name, price=Decimal(price)))

    async def invoiced_project(
        self,
        collaborator: Collaborator | None = None,
        amount: str = "100",
        monthly_invoice_id: str | None = None,
        month: str | None = None,
        **fields: Any,
    ) -> Project:
        """A paid project with an uploaded, pending collaborator invoice."""
        fields.setdefault("invoice_status", InvoiceStatus.pending)
        return await self.paid_project(
            invoice_url="https://files.example.com/invoice.pdf",
            invoice_public_id="invoices/abc",
            invoice_type=InvoiceType.monthly if monthly_invoice_id else InvoiceType.per_project,
            monthly_invoice_id=monthly_invoice_id,
            monthly_invoice_month=month,
            invoice_uploaded_at=datetime(2025, 2, 1, tzinfo=timezone.utc),
            assigned_collaborator_id=collaborator.id if collaborator else None,
            collaborator_payment_amount=Decimal(amount),
            **fields,
        )
