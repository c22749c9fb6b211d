"""
Rental property repository.
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rent_tracker.core.exceptions import ConcurrencyConflictError, ValidationError
from rent_tracker.core.identifiers import require_tenant_id, require_text
from rent_tracker.core.logger import get_logger
from rent_tracker.models.property import RentalPropertyModel
from rent_tracker.schemas.property import (
    Address,
    LeaseDates,
    PropertyManager,
    RentalProperty,
)

from .base import TenantRepository, matches_any

logger = get_logger()

# Search terms longer than this are truncated
MAX_SEARCH_TERM_LENGTH = 200

CHILD_ID_FIELDS = ("payment_ids", "transaction_ids", "attachment_ids")

# Fresh reads attempted when another write bumps the property version
CHILD_ID_UPDATE_ATTEMPTS = 3


class PropertyRepository(TenantRepository[RentalProperty]):
    """Repository for rental properties with address and rent queries."""

    # Sort keys accepted by get_page, mapped to columns
    SORT_COLUMNS = {
        "address": "street",
        "city": "city",
        "state": "state",
        "rentamount": "rent_amount",
        "leasestartdate": "lease_start_date",
        "leaseenddate": "lease_end_date",
    }

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, RentalPropertyModel, RentalProperty)

    def _to_document(self, row: Mapping[str, Any]) -> RentalProperty:
        data = dict(row)
        return RentalProperty(
            id=data["id"],
            tenant_id=data["tenant_id"],
            created_at=data["created_at"],
            updated_at=data["updated_at"],
            version=data["version"],
            user_id=data["user_id"],
            address=Address(
                street=data["street"],
                city=data["city"],
                state=data["state"],
                zip_code=data["zip_code"],
            ),
            description=data["description"],
            rent_amount=data["rent_amount"],
            lease_dates=LeaseDates(
                start_date=data["lease_start_date"],
                end_date=data["lease_end_date"],
            ),
            property_manager=PropertyManager(
                name=data["property_manager_name"],
                contact=data["property_manager_contact"],
            ),
            payment_ids=data["payment_ids"] or [],
            transaction_ids=data["transaction_ids"] or [],
            attachment_ids=data["attachment_ids"] or [],
            attributes=data["attributes"] or {},
        )

    def _to_values(self, entity: RentalProperty) -> dict[str, Any]:
        return {
            "id": entity.id,
            "tenant_id": entity.tenant_id,
            "created_at": entity.created_at,
            "updated_at": entity.updated_at,
            "version": entity.version,
            "user_id": entity.user_id,
            "street": entity.address.street,
            "city": entity.address.city,
            "state": entity.address.state,
            "zip_code": entity.address.zip_code,
            "description": entity.description,
            "rent_amount": entity.rent_amount,
            "lease_start_date": entity.lease_dates.start_date,
            "lease_end_date": entity.lease_dates.end_date,
            "property_manager_name": entity.property_manager.name,
            "property_manager_contact": entity.property_manager.contact,
            "payment_ids": list(entity.payment_ids),
            "transaction_ids": list(entity.transaction_ids),
            "attachment_ids": list(entity.attachment_ids),
            "attributes": dict(entity.attributes),
        }

    def _search_clause(self, term: str, include_manager: bool = False):
        columns = [
            self.table.c.street,
            self.table.c.city,
            self.table.c.state,
            self.table.c.zip_code,
            self.table.c.description,
        ]
        if include_manager:
            columns += [
                self.table.c.property_manager_name,
                self.table.c.property_manager_contact,
            ]
        return matches_any(columns, term[:MAX_SEARCH_TERM_LENGTH])

    async def get_by_city(self, tenant_id: str, city: str) -> list[RentalProperty]:
        """Get properties in a city (exact match)."""
        require_tenant_id(tenant_id)
        require_text(city, "city")
        stmt = self._select(tenant_id).where(self.table.c.city == city)
        return await self._fetch_all(stmt)

    async def get_by_rent_range(
        self, tenant_id: str, min_rent: Decimal, max_rent: Decimal
    ) -> list[RentalProperty]:
        """Get properties whose rent lies within [min_rent, max_rent]."""
        require_tenant_id(tenant_id)
        if min_rent < 0 or max_rent < 0:
            raise ValidationError(
                "Rent amounts cannot be negative",
                field="min_rent" if min_rent < 0 else "max_rent",
            )
        if min_rent > max_rent:
            raise ValidationError(
                "Minimum rent cannot be greater than maximum rent", field="min_rent"
            )
        stmt = self._select(tenant_id).where(
            self.table.c.rent_amount.between(min_rent, max_rent)
        )
        return await self._fetch_all(stmt)

    async def search(self, tenant_id: str, search_text: str) -> list[RentalProperty]:
        """Case-insensitive search over address and description, newest first."""
        require_tenant_id(tenant_id)
        require_text(search_text, "search_text")
        stmt = (
            self._select(tenant_id)
            .where(self._search_clause(search_text.strip()))
            .order_by(self.table.c.updated_at.desc())
        )
        return await self._fetch_all(stmt)

    async def get_page(
        self,
        tenant_id: str,
        *,
        offset: int,
        limit: int,
        search_term: str | None = None,
        sort_field: str | None = None,
        sort_descending: bool = False,
    ) -> tuple[list[RentalProperty], int]:
        """Get one page of properties and the total matching count.

        Unknown sort fields fall back to ordering by street.
        """
        require_tenant_id(tenant_id)
        conditions = [self._tenant_clause(tenant_id)]
        if search_term and search_term.strip():
            conditions.append(
                self._search_clause(search_term.strip(), include_manager=True)
            )

        count_stmt = select(func.count()).select_from(self.table).where(*conditions)
        total = int((await self.session.execute(count_stmt)).scalar() or 0)

        stmt = select(self.table).where(*conditions)
        if sort_field and sort_field.strip():
            column = self.table.c[
                self.SORT_COLUMNS.get(sort_field.strip().lower(), "street")
            ]
            stmt = stmt.order_by(column.desc() if sort_descending else column.asc())
        stmt = stmt.order_by(self.table.c.created_at).offset(offset).limit(limit)

        return await self._fetch_all(stmt), total

    async def add_child_id(
        self, tenant_id: str, property_id: str | UUID, field: str, child_id: str
    ) -> RentalProperty | None:
        """Record a child document id on a property; returns None if it is missing."""
        return await self._change_child_ids(
            tenant_id, property_id, field, child_id, add=True
        )

    async def remove_child_id(
        self, tenant_id: str, property_id: str | UUID, field: str, child_id: str
    ) -> RentalProperty | None:
        """Drop a child document id from a property; returns None if it is missing."""
        return await self._change_child_ids(
            tenant_id, property_id, field, child_id, add=False
        )

    async def _change_child_ids(
        self,
        tenant_id: str,
        property_id: str | UUID,
        field: str,
        child_id: str,
        *,
        add: bool,
    ) -> RentalProperty | None:
        if field not in CHILD_ID_FIELDS:
            raise ValidationError(f"Unknown child id list '{field}'", field="field")

        for attempt in range(1, CHILD_ID_UPDATE_ATTEMPTS + 1):
            rental_property = await self.get_by_id(tenant_id, property_id)
            if rental_property is None:
                return None

            ids: list[str] = getattr(rental_property, field)
            if add and child_id not in ids:
                ids.append(child_id)
            elif not add and child_id in ids:
                ids.remove(child_id)
            else:
                return rental_property

            try:
                return await self.update(tenant_id, rental_property.id, rental_property)
            except ConcurrencyConflictError:
                if attempt == CHILD_ID_UPDATE_ATTEMPTS:
                    raise
                logger.info(
                    "Retrying child id change after concurrent write",
                    property_id=rental_property.formatted_id,
                    field=field,
                    attempt=attempt,
                )
        return None
