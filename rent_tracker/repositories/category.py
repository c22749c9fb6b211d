"""
Transaction category repository.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from rent_tracker.core.identifiers import require_tenant_id
from rent_tracker.models.category import TransactionCategoryModel, TransactionType
from rent_tracker.schemas.category import TransactionCategory

from .base import SharedRepository


class TransactionCategoryRepository(SharedRepository[TransactionCategory]):
    """Transaction categories, tenant-defined or system defaults."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, TransactionCategoryModel, TransactionCategory)

    async def get_by_type(
        self, tenant_id: str, transaction_type: TransactionType
    ) -> list[TransactionCategory]:
        """Get the tenant's and system categories of one type, in display order."""
        require_tenant_id(tenant_id)
        stmt = (
            self._select(tenant_id, include_system=True)
            .where(self.table.c.transaction_type == transaction_type)
            .order_by(self.table.c.order, self.table.c.name)
        )
        return await self._fetch_all(stmt)
