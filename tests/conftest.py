"""
Pytest configuration and shared fixtures
"""

import pytest
import pytest_asyncio
from datetime import datetime
from typing import AsyncGenerator, List, Sequence
from uuid import uuid4
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from customer_addresses.models import Base
from customer_addresses.schemas.address import Address, Identity
from customer_addresses.services.address_service import AddressService
from customer_addresses.services.notifications import Notification
from customer_addresses.stores.base import (
    Condition,
    OrderBy,
    RemoteStoreError,
    RemoteTableStore,
    Row,
)
from customer_addresses.stores.sqlalchemy_store import SQLAlchemyTableStore
from customer_addresses.utils.security import JWTManager


# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class RecordingStore(RemoteTableStore):
    """
    Wraps a real store, records every call and can fail chosen calls

    fail_on("update", 2) makes the second update call raise RemoteStoreError
    without reaching the wrapped store.
    """

    def __init__(self, inner: RemoteTableStore):
        self.inner = inner
        self.calls: List[tuple] = []
        self.failures = {}

    def fail_on(self, operation: str, occurrence: int = 1, message: str = "permission denied"):
        self.failures[(operation, occurrence)] = message

    def operations(self) -> List[str]:
        return [call[0] for call in self.calls]

    def _record(self, operation: str, *details) -> None:
        self.calls.append((operation, *details))
        occurrence = self.operations().count(operation)
        message = self.failures.get((operation, occurrence))
        if message is not None:
            raise RemoteStoreError(message, operation=operation)

    async def select(
        self, table: str, filters: Sequence[Condition] = (), order: Sequence[OrderBy] = ()
    ) -> List[Row]:
        self._record("select", table, list(filters), list(order))
        return await self.inner.select(table, filters, order)

    async def insert(self, table: str, row: Row) -> Row:
        self._record("insert", table, dict(row))
        return await self.inner.insert(table, row)

    async def update(self, table: str, patch: Row, filters: Sequence[Condition]) -> List[Row]:
        self._record("update", table, dict(patch), list(filters))
        return await self.inner.update(table, patch, filters)

    async def delete(self, table: str, filters: Sequence[Condition]) -> None:
        self._record("delete", table, list(filters))
        await self.inner.delete(table, filters)


class ListNotifier:
    """Collects notifications for assertions"""

    def __init__(self):
        self.notifications: List[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def titles(self) -> List[str]:
        return [n.title for n in self.notifications]


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh database session for each test.

    Uses in-memory SQLite database for fast test execution.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_factory() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def table_store(db_session: AsyncSession) -> SQLAlchemyTableStore:
    return SQLAlchemyTableStore(db_session)


@pytest.fixture
def recording_store(table_store: SQLAlchemyTableStore) -> RecordingStore:
    return RecordingStore(table_store)


@pytest.fixture
def address_service(recording_store: RecordingStore) -> AddressService:
    return AddressService(recording_store)


@pytest.fixture
def seed_address(table_store: SQLAlchemyTableStore):
    """
    Insert a row directly, bypassing the service

    Lets tests control created_at and set up states the service would never
    produce (for example two defaults).
    """

    async def _seed(
        owner: Identity,
        full_address: str,
        is_default: bool = False,
        created_at: datetime = None,
        address_label: str = "Home",
    ) -> Address:
        row = {
            "user_id": owner.id,
            "address_label": address_label,
            "full_address": full_address,
            "is_default": is_default,
        }
        if created_at is not None:
            row["created_at"] = created_at
            row["updated_at"] = created_at
        return Address.model_validate(await table_store.insert("customer_addresses", row))

    return _seed


@pytest.fixture
def notifier() -> ListNotifier:
    return ListNotifier()


@pytest.fixture
def owner() -> Identity:
    return Identity(id=uuid4(), email="customer@example.com", role="authenticated")


@pytest.fixture
def other_owner() -> Identity:
    return Identity(id=uuid4(), email="neighbour@example.com", role="authenticated")


@pytest_asyncio.fixture(scope="function")
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client for the FastAPI app.
    The table store dependency is overridden to use the test database.
    """
    from customer_addresses.main import app
    from customer_addresses.dependencies import get_table_store

    async def override_get_table_store():
        yield SQLAlchemyTableStore(db_session)

    app.dependency_overrides[get_table_store] = override_get_table_store

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()


def make_auth_headers(identity: Identity) -> dict:
    token = JWTManager.create_access_token(
        {"sub": str(identity.id), "email": identity.email, "role": identity.role}
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(owner: Identity) -> dict:
    return make_auth_headers(owner)


@pytest.fixture
def other_auth_headers(other_owner: Identity) -> dict:
    return make_auth_headers(other_owner)
