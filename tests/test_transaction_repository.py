"""
Tests for property transaction queries and batched includes.
"""

from datetime import UTC, datetime
from decimal import Decimal

import pytest
from sqlalchemy import event

from rent_tracker.core.exceptions import ValidationError
from rent_tracker.models import TransactionType
from rent_tracker.repositories.attachment import AttachmentRepository
from rent_tracker.repositories.transaction import PropertyTransactionRepository
from rent_tracker.schemas import Attachment, PropertyTransaction

from conftest import TENANT_ID


def build_transaction(property_id: str, category_id: str, **overrides):
    data = {
        "tenant_id": TENANT_ID,
        "rental_property_id": property_id,
        "amount": Decimal("100.00"),
        "transaction_date": datetime(2024, 2, 1, tzinfo=UTC),
        "transaction_type": TransactionType.EXPENSE,
        "category_id": category_id,
    }
    data.update(overrides)
    return PropertyTransaction(**data)


@pytest.fixture
def statement_log(test_engine):
    """Collect SQL statements issued through the test engine."""
    statements: list[str] = []

    def before_execute(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(test_engine.sync_engine, "before_cursor_execute", before_execute)
    yield statements
    event.remove(test_engine.sync_engine, "before_cursor_execute", before_execute)


class TestPropertyTransactionRepository:
    """Test PropertyTransactionRepository functionality."""

    @pytest.mark.asyncio
    async def test_create_rejects_non_positive_amount(
        self, test_session, rental_property, expense_category
    ) -> None:
        """Test that transactions must have a positive amount."""
        repo = PropertyTransactionRepository(test_session)

        with pytest.raises(ValidationError):
            await repo.create(
                build_transaction(
                    rental_property.formatted_id,
                    expense_category.formatted_id,
                    amount=Decimal("0"),
                )
            )

    @pytest.mark.asyncio
    async def test_get_by_id_resolves_all_includes(
        self, test_session, rental_property, expense_category, payment_method
    ) -> None:
        """Test that a single read embeds category, method and attachments."""
        attachment = await AttachmentRepository(test_session).create(
            Attachment(
                tenant_id=TENANT_ID,
                file_name="receipt.pdf",
                content_type="application/pdf",
                storage_path="receipt.pdf",
            )
        )
        repo = PropertyTransactionRepository(test_session)
        created = await repo.create(
            build_transaction(
                rental_property.formatted_id,
                expense_category.formatted_id,
                payment_method_id=payment_method.formatted_id,
                attachment_ids=[attachment.formatted_id],
            )
        )

        fetched = await repo.get_by_id(TENANT_ID, created.id)

        assert fetched.category.name == "Maintenance"
        assert fetched.payment_method.name == "Bank Transfer"
        assert [a.file_name for a in fetched.attachments] == ["receipt.pdf"]

    @pytest.mark.asyncio
    async def test_get_all_without_includes(
        self, test_session, rental_property, expense_category
    ) -> None:
        """Test that references stay unresolved unless requested."""
        repo = PropertyTransactionRepository(test_session)
        await repo.create(
            build_transaction(
                rental_property.formatted_id, expense_category.formatted_id
            )
        )

        transactions = await repo.get_all(TENANT_ID)

        assert len(transactions) == 1
        assert transactions[0].category is None

    @pytest.mark.asyncio
    async def test_includes_batched_per_type(
        self,
        test_session,
        rental_property,
        income_category,
        expense_category,
        statement_log,
    ) -> None:
        """Test one category query regardless of the number of transactions."""
        repo = PropertyTransactionRepository(test_session)
        property_id = rental_property.formatted_id
        for day in range(1, 6):
            await repo.create(
                build_transaction(
                    property_id,
                    expense_category.formatted_id,
                    transaction_date=datetime(2024, 3, day, tzinfo=UTC),
                )
            )
        await repo.create(
            build_transaction(
                property_id,
                income_category.formatted_id,
                transaction_type=TransactionType.INCOME,
            )
        )
        statement_log.clear()

        transactions = await repo.get_by_property_id(
            TENANT_ID, rental_property.id, includes=["Category"]
        )

        category_queries = [
            s for s in statement_log if "FROM transaction_categories" in s
        ]
        assert len(transactions) == 6
        assert len(category_queries) == 1
        assert {t.category.name for t in transactions} == {"Rent", "Maintenance"}

    @pytest.mark.asyncio
    async def test_get_by_property_id_newest_first(
        self, test_session, rental_property, expense_category
    ) -> None:
        """Test that a property's transactions come back newest first."""
        repo = PropertyTransactionRepository(test_session)
        for day in (3, 1, 2):
            await repo.create(
                build_transaction(
                    rental_property.formatted_id,
                    expense_category.formatted_id,
                    transaction_date=datetime(2024, 4, day, tzinfo=UTC),
                )
            )

        transactions = await repo.get_by_property_id(TENANT_ID, rental_property.id)

        assert [t.transaction_date.day for t in transactions] == [3, 2, 1]

    @pytest.mark.asyncio
    async def test_unknown_include_rejected(self, test_session) -> None:
        """Test that unknown include names are a validation error."""
        repo = PropertyTransactionRepository(test_session)

        with pytest.raises(ValidationError):
            await repo.get_all(TENANT_ID, includes=["Category", "Owner"])
