"""
Property transaction repository with batched reference resolution.
"""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from rent_tracker.core.exceptions import ValidationError
from rent_tracker.core.identifiers import canonical_id, require_tenant_id
from rent_tracker.core.logger import get_logger
from rent_tracker.models.transaction import PropertyTransactionModel
from rent_tracker.schemas.base import Include
from rent_tracker.schemas.transaction import PropertyTransaction

from .attachment import AttachmentRepository
from .base import TenantRepository, parse_includes
from .category import TransactionCategoryRepository
from .payment_method import PaymentMethodRepository

logger = get_logger()

ALL_INCLUDES = frozenset(Include)


class PropertyTransactionRepository(TenantRepository[PropertyTransaction]):
    """Property transactions with category, payment method and attachment includes.

    Each requested include is resolved with one query keyed by the distinct
    referenced ids, then mapped back onto the transactions.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PropertyTransactionModel, PropertyTransaction)
        self.categories = TransactionCategoryRepository(session)
        self.payment_methods = PaymentMethodRepository(session)
        self.attachments = AttachmentRepository(session)

    async def create(self, entity: PropertyTransaction | None) -> PropertyTransaction:
        """Insert a transaction; the amount must be positive."""
        if entity is not None and entity.amount <= 0:
            raise ValidationError(
                "Transaction amount must be positive", field="amount"
            )
        return await super().create(entity)

    async def get_all(
        self,
        tenant_id: str,
        include_system: bool = False,
        includes: Iterable[str | Include] | None = None,
    ) -> list[PropertyTransaction]:
        requested = parse_includes(includes)
        transactions = await super().get_all(tenant_id, include_system)
        return await self.resolve_includes(tenant_id, transactions, requested)

    async def get_by_id(
        self, tenant_id: str, entity_id: str | UUID
    ) -> PropertyTransaction | None:
        """Get a transaction with every reference resolved."""
        transaction = await super().get_by_id(tenant_id, entity_id)
        if transaction is None:
            return None
        await self.resolve_includes(tenant_id, [transaction], ALL_INCLUDES)
        return transaction

    async def get_by_property_id(
        self,
        tenant_id: str,
        property_id: str | UUID,
        includes: Iterable[str | Include] | None = None,
    ) -> list[PropertyTransaction]:
        """Get a property's transactions, newest first.

        All references are resolved unless ``includes`` narrows them.
        """
        require_tenant_id(tenant_id)
        requested = ALL_INCLUDES if includes is None else parse_includes(includes)
        stmt = (
            self._select(tenant_id)
            .where(self.table.c.rental_property_id == canonical_id(property_id))
            .order_by(self.table.c.transaction_date.desc())
        )
        transactions = await self._fetch_all(stmt)
        return await self.resolve_includes(tenant_id, transactions, requested)

    async def resolve_includes(
        self,
        tenant_id: str,
        transactions: list[PropertyTransaction],
        requested: Iterable[Include],
    ) -> list[PropertyTransaction]:
        requested = set(requested)
        if not transactions or not requested:
            return transactions

        if Include.CATEGORY in requested:
            category_ids = {t.category_id for t in transactions if t.category_id}
            if category_ids:
                categories = await self.categories.get_by_ids(
                    tenant_id, category_ids, include_system=True
                )
                by_id = {c.formatted_id: c for c in categories}
                for transaction in transactions:
                    transaction.category = by_id.get(transaction.category_id)

        if Include.PAYMENT_METHOD in requested:
            method_ids = {
                t.payment_method_id for t in transactions if t.payment_method_id
            }
            if method_ids:
                methods = await self.payment_methods.get_by_ids(
                    tenant_id, method_ids, include_system=True
                )
                by_id = {m.formatted_id: m for m in methods}
                for transaction in transactions:
                    if transaction.payment_method_id:
                        transaction.payment_method = by_id.get(
                            transaction.payment_method_id
                        )

        if Include.ATTACHMENTS in requested:
            attachment_ids = {
                attachment_id
                for t in transactions
                for attachment_id in t.attachment_ids
            }
            if attachment_ids:
                attachments = await self.attachments.get_by_ids(
                    tenant_id, attachment_ids
                )
                by_id = {a.formatted_id: a for a in attachments}
                for transaction in transactions:
                    transaction.attachments = [
                        by_id[attachment_id]
                        for attachment_id in transaction.attachment_ids
                        if attachment_id in by_id
                    ]

        logger.debug(
            "Resolved transaction includes",
            tenant_id=tenant_id,
            transactions=len(transactions),
            includes=sorted(item.value for item in requested),
        )
        return transactions
