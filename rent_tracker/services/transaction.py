"""
Property transaction service with income and expense reporting.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from rent_tracker.core.exceptions import ValidationError
from rent_tracker.core.identifiers import (
    canonical_id,
    require_tenant_id,
    require_text,
)
from rent_tracker.core.logger import get_logger
from rent_tracker.models.category import TransactionType
from rent_tracker.repositories.category import TransactionCategoryRepository
from rent_tracker.repositories.property import PropertyRepository
from rent_tracker.repositories.transaction import PropertyTransactionRepository
from rent_tracker.schemas.base import Include, ensure_utc
from rent_tracker.schemas.category import TransactionCategory
from rent_tracker.schemas.financial import DateRangePeriod, FinancialSummary
from rent_tracker.schemas.property import RentalProperty
from rent_tracker.schemas.transaction import (
    PropertyTransaction,
    PropertyTransactionCreate,
)

logger = get_logger()

UNCATEGORIZED = "Uncategorized"


class PropertyTransactionService:
    """Service for property income and expense transactions."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.transaction_repo = PropertyTransactionRepository(session)
        self.property_repo = PropertyRepository(session)
        self.category_repo = TransactionCategoryRepository(session)

    async def _require_property(
        self, tenant_id: str, property_id: str | UUID
    ) -> RentalProperty:
        require_text(str(property_id or ""), "rental_property_id")
        rental_property = await self.property_repo.get_by_id(tenant_id, property_id)
        if rental_property is None:
            raise ValidationError(
                f"Property with ID {property_id} not found.",
                field="rental_property_id",
            )
        return rental_property

    async def _require_matching_category(
        self, transaction: PropertyTransaction
    ) -> TransactionCategory:
        category = await self.category_repo.get_shared_by_id(transaction.category_id)
        if category is None:
            raise ValidationError(
                f"Category with ID {transaction.category_id} not found.",
                field="category_id",
            )
        if category.transaction_type != transaction.transaction_type:
            raise ValidationError(
                "Transaction type must match category type.",
                field="transaction_type",
                details={
                    "transaction_type": transaction.transaction_type.value,
                    "category_type": category.transaction_type.value,
                },
            )
        return category

    @staticmethod
    def _validate_fields(transaction: PropertyTransaction) -> None:
        if transaction.amount <= 0:
            raise ValidationError("Amount must be positive.", field="amount")
        if transaction.transaction_date is None:
            raise ValidationError(
                "Transaction date is required and must be valid.",
                field="transaction_date",
            )
        if not transaction.category_id or not transaction.category_id.strip():
            raise ValidationError("Category is required.", field="category_id")

    async def get_transaction(
        self, tenant_id: str, transaction_id: str | UUID
    ) -> PropertyTransaction | None:
        return await self.transaction_repo.get_by_id(tenant_id, transaction_id)

    async def get_transactions_by_property(
        self,
        tenant_id: str,
        property_id: str | UUID,
        includes: Iterable[str | Include] | None = None,
    ) -> list[PropertyTransaction]:
        """Get a property's transactions, newest first; the property must exist."""
        await self._require_property(tenant_id, property_id)
        return await self.transaction_repo.get_by_property_id(
            tenant_id, property_id, includes
        )

    async def create_transaction(
        self, transaction: PropertyTransaction
    ) -> PropertyTransaction:
        created = await self.create_transactions([transaction])
        return created[0]

    async def create_transactions(
        self, transactions: list[PropertyTransaction]
    ) -> list[PropertyTransaction]:
        """Create a batch of transactions.

        Every transaction is validated (fields, owning property, category and
        type agreement) before the first insert, so a rejected batch writes
        nothing.
        """
        if not transactions:
            raise ValidationError(
                "At least one transaction is required.", field="transactions"
            )

        for transaction in transactions:
            if transaction is None:
                raise ValidationError(
                    "transaction cannot be null", field="transactions"
                )
            require_tenant_id(transaction.tenant_id)
            require_text(transaction.rental_property_id, "rental_property_id")
            self._validate_fields(transaction)

        properties: dict[tuple[str, str], RentalProperty] = {}
        for transaction in transactions:
            key = (transaction.tenant_id, canonical_id(transaction.rental_property_id))
            if key not in properties:
                properties[key] = await self._require_property(*key)
            await self._require_matching_category(transaction)

        for transaction in transactions:
            transaction.rental_property_id = canonical_id(
                transaction.rental_property_id
            )
            transaction.category_id = canonical_id(transaction.category_id)
            if transaction.payment_method_id:
                transaction.payment_method_id = canonical_id(
                    transaction.payment_method_id
                )
            transaction.transaction_date = ensure_utc(transaction.transaction_date)

        created: list[PropertyTransaction] = []
        try:
            for transaction in transactions:
                created.append(await self.transaction_repo.create(transaction))
            for transaction in created:
                await self.property_repo.add_child_id(
                    transaction.tenant_id,
                    transaction.rental_property_id,
                    "transaction_ids",
                    transaction.formatted_id,
                )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info(
            "Created transactions",
            count=len(created),
            properties=len(properties),
        )
        return created

    async def create_transactions_for_property(
        self,
        tenant_id: str,
        property_id: str | UUID,
        items: list[PropertyTransactionCreate],
    ) -> list[PropertyTransaction]:
        """Create transactions from client payloads under one property."""
        require_tenant_id(tenant_id)
        if not items:
            raise ValidationError(
                "At least one transaction is required.", field="transactions"
            )
        property_key = canonical_id(property_id)
        return await self.create_transactions(
            [item.to_document(tenant_id, property_key) for item in items]
        )

    async def update_transaction(
        self,
        tenant_id: str,
        transaction_id: str | UUID,
        updated_transaction: PropertyTransaction,
    ) -> PropertyTransaction | None:
        """Apply the modifiable fields; returns None if it does not exist."""
        existing = await self.transaction_repo.get_by_id(tenant_id, transaction_id)
        if existing is None:
            return None

        self._validate_fields(updated_transaction)
        category = await self._require_matching_category(updated_transaction)

        existing.amount = updated_transaction.amount
        existing.transaction_date = ensure_utc(updated_transaction.transaction_date)
        existing.transaction_type = updated_transaction.transaction_type
        existing.category_id = canonical_id(updated_transaction.category_id)
        existing.payment_method_id = (
            canonical_id(updated_transaction.payment_method_id)
            if updated_transaction.payment_method_id
            else None
        )
        existing.reference = updated_transaction.reference
        existing.notes = updated_transaction.notes
        existing.attachment_ids = list(updated_transaction.attachment_ids or [])
        existing.category = category

        try:
            result = await self.transaction_repo.update(
                tenant_id, existing.id, existing
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return result

    async def delete_transaction(
        self, tenant_id: str, transaction_id: str | UUID
    ) -> bool:
        existing = await self.transaction_repo.get_by_id(tenant_id, transaction_id)
        if existing is None:
            return False

        try:
            await self.transaction_repo.delete(tenant_id, existing.id)
            await self.property_repo.remove_child_id(
                tenant_id,
                existing.rental_property_id,
                "transaction_ids",
                existing.formatted_id,
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info(
            "Deleted transaction",
            transaction_id=existing.formatted_id,
            tenant_id=tenant_id,
        )
        return True

    # Reporting

    async def _filtered(
        self,
        tenant_id: str,
        property_id: str | UUID,
        transaction_type: TransactionType | None,
        start_date: datetime | None,
        end_date: datetime | None,
        includes: Iterable[Include] = (),
    ) -> list[PropertyTransaction]:
        transactions = await self.get_transactions_by_property(
            tenant_id, property_id, list(includes)
        )
        return filter_transactions(
            transactions, transaction_type, start_date, end_date
        )

    async def get_total_income(
        self,
        tenant_id: str,
        property_id: str | UUID,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> Decimal:
        transactions = await self._filtered(
            tenant_id, property_id, TransactionType.INCOME, start_date, end_date
        )
        return sum((t.amount for t in transactions), Decimal("0"))

    async def get_total_expenses(
        self,
        tenant_id: str,
        property_id: str | UUID,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> Decimal:
        transactions = await self._filtered(
            tenant_id, property_id, TransactionType.EXPENSE, start_date, end_date
        )
        return sum((t.amount for t in transactions), Decimal("0"))

    async def get_transactions_by_type(
        self,
        tenant_id: str,
        property_id: str | UUID,
        transaction_type: TransactionType,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[PropertyTransaction]:
        """Get one type of transaction, newest first, with category and method."""
        return await self._filtered(
            tenant_id,
            property_id,
            transaction_type,
            start_date,
            end_date,
            includes=(Include.CATEGORY, Include.PAYMENT_METHOD),
        )

    async def get_totals_by_category(
        self,
        tenant_id: str,
        property_id: str | UUID,
        transaction_type: TransactionType,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> dict[str, Decimal]:
        """Sum one type of transaction per category name."""
        transactions = await self._filtered(
            tenant_id,
            property_id,
            transaction_type,
            start_date,
            end_date,
            includes=(Include.CATEGORY,),
        )
        return totals_by_category(transactions)

    async def get_financial_summary(
        self,
        tenant_id: str,
        property_id: str | UUID,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> FinancialSummary:
        """Income, expenses, net cashflow and category breakdowns for a property.

        Transactions are read once with categories resolved; the totals are
        derived from that single read.
        """
        rental_property = await self._require_property(tenant_id, property_id)
        transactions = await self.transaction_repo.get_by_property_id(
            tenant_id, property_id, [Include.CATEGORY]
        )
        income = filter_transactions(
            transactions, TransactionType.INCOME, start_date, end_date
        )
        expenses = filter_transactions(
            transactions, TransactionType.EXPENSE, start_date, end_date
        )

        total_income = sum((t.amount for t in income), Decimal("0"))
        total_expenses = sum((t.amount for t in expenses), Decimal("0"))
        return FinancialSummary(
            property_id=rental_property.formatted_id,
            property_name=rental_property.address.street,
            total_income=total_income,
            total_expenses=total_expenses,
            net_cashflow=total_income - total_expenses,
            date_range=DateRangePeriod(
                start_date=ensure_utc(start_date), end_date=ensure_utc(end_date)
            ),
            income_by_category=totals_by_category(income),
            expenses_by_category=totals_by_category(expenses),
        )


def filter_transactions(
    transactions: Iterable[PropertyTransaction],
    transaction_type: TransactionType | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> list[PropertyTransaction]:
    """Filter by type and inclusive date bounds, newest first."""
    start = ensure_utc(start_date)
    end = ensure_utc(end_date)
    result = [
        t
        for t in transactions
        if (transaction_type is None or t.transaction_type == transaction_type)
        and (start is None or t.transaction_date >= start)
        and (end is None or t.transaction_date <= end)
    ]
    result.sort(key=lambda t: t.transaction_date, reverse=True)
    return result


def totals_by_category(
    transactions: Iterable[PropertyTransaction],
) -> dict[str, Decimal]:
    totals: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    for transaction in transactions:
        name = transaction.category.name if transaction.category else UNCATEGORIZED
        totals[name] += transaction.amount
    return dict(totals)
