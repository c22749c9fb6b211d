"""
Rental payment repository with payment method resolution.
"""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from rent_tracker.core.exceptions import ValidationError
from rent_tracker.core.identifiers import canonical_id, require_tenant_id
from rent_tracker.core.logger import get_logger
from rent_tracker.models.payment import RentalPaymentModel
from rent_tracker.schemas.base import Include
from rent_tracker.schemas.payment import RentalPayment

from .base import TenantRepository, parse_includes
from .payment_method import PaymentMethodRepository

logger = get_logger()


class PaymentRepository(TenantRepository[RentalPayment]):
    """Rental payments with optional payment method includes."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, RentalPaymentModel, RentalPayment)
        self.payment_methods = PaymentMethodRepository(session)

    async def create(self, entity: RentalPayment | None) -> RentalPayment:
        """Insert a payment; the amount must be positive."""
        if entity is not None and entity.amount <= 0:
            raise ValidationError("Payment amount must be positive", field="amount")
        return await super().create(entity)

    async def get_all(
        self,
        tenant_id: str,
        include_system: bool = False,
        includes: Iterable[str | Include] | None = None,
    ) -> list[RentalPayment]:
        requested = parse_includes(includes)
        payments = await super().get_all(tenant_id, include_system)
        return await self.resolve_includes(tenant_id, payments, requested)

    async def get_by_property_id(
        self,
        tenant_id: str,
        property_id: str | UUID,
        includes: Iterable[str | Include] | None = None,
    ) -> list[RentalPayment]:
        """Get a property's payments, newest payment date first."""
        require_tenant_id(tenant_id)
        requested = parse_includes(includes)
        stmt = (
            self._select(tenant_id)
            .where(self.table.c.rental_property_id == canonical_id(property_id))
            .order_by(self.table.c.payment_date.desc())
        )
        payments = await self._fetch_all(stmt)
        return await self.resolve_includes(tenant_id, payments, requested)

    async def resolve_includes(
        self,
        tenant_id: str,
        payments: list[RentalPayment],
        requested: set[Include],
    ) -> list[RentalPayment]:
        if Include.PAYMENT_METHOD not in requested or not payments:
            return payments

        method_ids = {p.payment_method_id for p in payments if p.payment_method_id}
        if not method_ids:
            return payments

        methods = await self.payment_methods.get_by_ids(
            tenant_id, method_ids, include_system=True
        )
        by_id = {method.formatted_id: method for method in methods}
        for payment in payments:
            if payment.payment_method_id:
                payment.payment_method = by_id.get(payment.payment_method_id)

        logger.debug(
            "Resolved payment includes",
            tenant_id=tenant_id,
            payments=len(payments),
            payment_methods=len(by_id),
        )
        return payments
