"""
Rental property service.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from rent_tracker.core.exceptions import ValidationError
from rent_tracker.core.identifiers import require_tenant_id
from rent_tracker.core.logger import get_logger
from rent_tracker.repositories.property import PropertyRepository
from rent_tracker.schemas.pagination import PaginatedResponse, PaginationParameters
from rent_tracker.schemas.property import RentalProperty

logger = get_logger()


class PropertyService:
    """Service for rental property operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.property_repo = PropertyRepository(session)

    async def get_property(
        self, tenant_id: str, property_id: str | UUID
    ) -> RentalProperty | None:
        return await self.property_repo.get_by_id(tenant_id, property_id)

    async def list_properties(
        self, tenant_id: str, parameters: PaginationParameters | None = None
    ) -> PaginatedResponse[RentalProperty]:
        """List a tenant's properties with search, sorting and paging."""
        parameters = parameters or PaginationParameters()
        items, total = await self.property_repo.get_page(
            tenant_id,
            offset=parameters.offset,
            limit=parameters.page_size,
            search_term=parameters.search_term,
            sort_field=parameters.sort_field,
            sort_descending=parameters.sort_descending,
        )
        return PaginatedResponse[RentalProperty].create(
            items, total, parameters.page_number, parameters.page_size
        )

    async def create_property(self, rental_property: RentalProperty) -> RentalProperty:
        """Create a property; the street address is required."""
        if rental_property is None:
            raise ValidationError("property cannot be null", field="property")
        if not rental_property.address.street.strip():
            raise ValidationError("Address is required", field="address.street")

        created = await self.property_repo.create(rental_property)
        await self.session.commit()
        logger.info(
            "Created property",
            property_id=created.formatted_id,
            tenant_id=created.tenant_id,
        )
        return created

    async def update_property(
        self,
        tenant_id: str,
        property_id: str | UUID,
        updated_property: RentalProperty,
    ) -> RentalProperty | None:
        """Apply client-editable fields onto the stored property.

        Identity, ownership, timestamps, version and child id lists always come
        from the stored copy. Returns None when the property does not exist.
        """
        existing = await self.property_repo.get_by_id(tenant_id, property_id)
        if existing is None:
            return None

        property_to_update = existing.model_copy(
            update={
                "address": updated_property.address,
                "description": updated_property.description,
                "rent_amount": updated_property.rent_amount,
                "lease_dates": updated_property.lease_dates,
                "property_manager": updated_property.property_manager,
                "attributes": dict(updated_property.attributes),
            }
        )

        try:
            result = await self.property_repo.update(
                tenant_id, existing.id, property_to_update
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return result

    async def delete_property(self, tenant_id: str, property_id: str | UUID) -> bool:
        require_tenant_id(tenant_id)
        existing = await self.property_repo.get_by_id(tenant_id, property_id)
        if existing is None:
            return False

        try:
            await self.property_repo.delete(tenant_id, existing.id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info(
            "Deleted property", property_id=existing.formatted_id, tenant_id=tenant_id
        )
        return True
