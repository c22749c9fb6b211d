"""
Attachment metadata repository.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from rent_tracker.core.identifiers import canonical_id, require_tenant_id, require_text
from rent_tracker.models.attachment import AttachmentModel
from rent_tracker.schemas.attachment import Attachment

from .base import TenantRepository


class AttachmentRepository(TenantRepository[Attachment]):
    """Attachments filtered by owning entity."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, AttachmentModel, Attachment)

    async def get_by_property_id(
        self, tenant_id: str, property_id: str | UUID
    ) -> list[Attachment]:
        require_tenant_id(tenant_id)
        stmt = self._select(tenant_id).where(
            self.table.c.rental_property_id == canonical_id(property_id)
        )
        return await self._fetch_all(stmt)

    async def get_by_payment_id(
        self, tenant_id: str, payment_id: str | UUID
    ) -> list[Attachment]:
        require_tenant_id(tenant_id)
        stmt = self._select(tenant_id).where(
            self.table.c.rental_payment_id == canonical_id(payment_id)
        )
        return await self._fetch_all(stmt)

    async def get_by_entity_type(
        self, tenant_id: str, entity_type: str
    ) -> list[Attachment]:
        """Get attachments by their owning entity kind, e.g. "Property"."""
        require_tenant_id(tenant_id)
        require_text(entity_type, "entity_type")
        stmt = self._select(tenant_id).where(self.table.c.entity_type == entity_type)
        return await self._fetch_all(stmt)
