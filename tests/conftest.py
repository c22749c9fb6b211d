"""
Pytest configuration and shared fixtures.
"""

import os

# Set required environment variables before package import
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "testing")

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from decimal import Decimal

import pytest
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from rent_tracker.models import Base, TransactionType
from rent_tracker.repositories.category import TransactionCategoryRepository
from rent_tracker.repositories.payment_method import PaymentMethodRepository
from rent_tracker.repositories.property import PropertyRepository
from rent_tracker.schemas import (
    Address,
    LeaseDates,
    PaymentMethod,
    PropertyManager,
    RentalProperty,
    TransactionCategory,
)
from rent_tracker.services.storage import FileStorageService

# Test database setup
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TENANT_ID = "tenant-1"
OTHER_TENANT_ID = "tenant-2"


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session with automatic cleanup."""
    session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        try:
            yield session
        finally:
            if session.in_transaction():
                await session.rollback()


@pytest.fixture
def storage(tmp_path) -> FileStorageService:
    """File storage rooted in a temporary upload directory."""
    return FileStorageService(tmp_path / "uploads")


def build_property(tenant_id: str = TENANT_ID, **overrides) -> RentalProperty:
    """Build an unsaved property with realistic defaults."""
    data = {
        "tenant_id": tenant_id,
        "address": Address(
            street="123 Main Street", city="Sydney", state="NSW", zip_code="2000"
        ),
        "description": "Modern 2 bedroom apartment",
        "rent_amount": Decimal("650.00"),
        "lease_dates": LeaseDates(
            start_date=datetime(2024, 1, 1, tzinfo=UTC),
            end_date=datetime(2024, 12, 31, tzinfo=UTC),
        ),
        "property_manager": PropertyManager(
            name="John Smith", contact="john.smith@realestate.com"
        ),
    }
    data.update(overrides)
    return RentalProperty(**data)


@pytest.fixture
async def rental_property(test_session) -> RentalProperty:
    """A stored property owned by TENANT_ID."""
    return await PropertyRepository(test_session).create(build_property())


@pytest.fixture
async def income_category(test_session) -> TransactionCategory:
    """A system-owned income category."""
    return await TransactionCategoryRepository(test_session).create(
        TransactionCategory(
            tenant_id="system",
            name="Rent",
            transaction_type=TransactionType.INCOME,
            is_system_default=True,
        )
    )


@pytest.fixture
async def expense_category(test_session) -> TransactionCategory:
    """A system-owned expense category."""
    return await TransactionCategoryRepository(test_session).create(
        TransactionCategory(
            tenant_id="system",
            name="Maintenance",
            transaction_type=TransactionType.EXPENSE,
            is_system_default=True,
        )
    )


@pytest.fixture
async def payment_method(test_session) -> PaymentMethod:
    """A system-owned payment method."""
    return await PaymentMethodRepository(test_session).create(
        PaymentMethod(tenant_id="system", name="Bank Transfer", is_system_default=True)
    )


def race_property_writes(
    monkeypatch, property_repo: PropertyRepository, times: int | None = None
) -> None:
    """Bump the stored property version right before each property update.

    This stands in for another writer landing between the read and the
    conditional update. ``times`` limits how many updates are raced; None
    races all of them.
    """
    real_update = property_repo.update
    remaining = [times]

    async def racing_update(tenant_id, entity_id, entity):
        if remaining[0] is None or remaining[0] > 0:
            if remaining[0] is not None:
                remaining[0] -= 1
            table = property_repo.table
            await property_repo.session.execute(
                update(table)
                .where(table.c.id == entity.id)
                .values(version=table.c.version + 1)
            )
        return await real_update(tenant_id, entity_id, entity)

    monkeypatch.setattr(property_repo, "update", racing_update)
