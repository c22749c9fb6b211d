"""
Rental payment service.
"""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from rent_tracker.core.exceptions import ValidationError
from rent_tracker.core.identifiers import (
    canonical_id,
    require_tenant_id,
    require_text,
)
from rent_tracker.core.logger import get_logger
from rent_tracker.repositories.base import parse_includes
from rent_tracker.repositories.payment import PaymentRepository
from rent_tracker.repositories.payment_method import PaymentMethodRepository
from rent_tracker.repositories.property import PropertyRepository
from rent_tracker.schemas.base import Include, ensure_utc
from rent_tracker.schemas.payment import RentalPayment
from rent_tracker.schemas.property import RentalProperty

logger = get_logger()


class PaymentService:
    """Service for rent payments recorded against properties."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.payment_repo = PaymentRepository(session)
        self.payment_method_repo = PaymentMethodRepository(session)
        self.property_repo = PropertyRepository(session)

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

    async def _validate_payment_method(self, payment_method_id: str | None) -> None:
        if not payment_method_id:
            return
        method = await self.payment_method_repo.get_shared_by_id(payment_method_id)
        if method is None:
            raise ValidationError(
                f"Payment method with ID {payment_method_id} not found.",
                field="payment_method_id",
            )

    async def get_payment(
        self,
        tenant_id: str,
        payment_id: str | UUID,
        includes: Iterable[str | Include] | None = None,
    ) -> RentalPayment | None:
        payment = await self.payment_repo.get_by_id(tenant_id, payment_id)
        if payment is None:
            return None
        # Single reads resolve the payment method unless told otherwise
        requested = (
            {Include.PAYMENT_METHOD} if includes is None else parse_includes(includes)
        )
        await self.payment_repo.resolve_includes(tenant_id, [payment], requested)
        return payment

    async def get_payments_by_property(
        self,
        tenant_id: str,
        property_id: str | UUID,
        includes: Iterable[str | Include] | None = None,
    ) -> list[RentalPayment]:
        """Get a property's payments, newest first; the property must exist."""
        await self._require_property(tenant_id, property_id)
        return await self.payment_repo.get_by_property_id(
            tenant_id, property_id, includes
        )

    async def create_payment(self, payment: RentalPayment) -> RentalPayment:
        """Record a payment against an existing property."""
        if payment is None:
            raise ValidationError("payment cannot be null", field="payment")
        require_tenant_id(payment.tenant_id)
        if payment.amount <= 0:
            raise ValidationError("Payment amount must be positive", field="amount")

        rental_property = await self._require_property(
            payment.tenant_id, payment.rental_property_id
        )
        await self._validate_payment_method(payment.payment_method_id)

        payment.rental_property_id = rental_property.formatted_id
        if payment.payment_method_id:
            payment.payment_method_id = canonical_id(payment.payment_method_id)
        payment.payment_date = ensure_utc(payment.payment_date)

        try:
            created = await self.payment_repo.create(payment)
            await self.property_repo.add_child_id(
                payment.tenant_id,
                rental_property.id,
                "payment_ids",
                created.formatted_id,
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info(
            "Created payment",
            payment_id=created.formatted_id,
            property_id=payment.rental_property_id,
            tenant_id=payment.tenant_id,
        )
        return created

    async def update_payment(
        self,
        tenant_id: str,
        payment_id: str | UUID,
        updated_payment: RentalPayment,
    ) -> RentalPayment | None:
        """Apply the modifiable payment fields; returns None if it does not exist."""
        existing = await self.payment_repo.get_by_id(tenant_id, payment_id)
        if existing is None:
            return None
        if updated_payment.amount <= 0:
            raise ValidationError("Payment amount must be positive", field="amount")
        await self._validate_payment_method(updated_payment.payment_method_id)

        existing.amount = updated_payment.amount
        existing.payment_date = ensure_utc(updated_payment.payment_date)
        existing.payment_method_id = (
            canonical_id(updated_payment.payment_method_id)
            if updated_payment.payment_method_id
            else None
        )
        existing.payment_reference = updated_payment.payment_reference
        existing.notes = updated_payment.notes

        try:
            result = await self.payment_repo.update(tenant_id, existing.id, existing)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return result

    async def delete_payment(self, tenant_id: str, payment_id: str | UUID) -> bool:
        existing = await self.payment_repo.get_by_id(tenant_id, payment_id)
        if existing is None:
            return False

        try:
            await self.payment_repo.delete(tenant_id, existing.id)
            await self.property_repo.remove_child_id(
                tenant_id,
                existing.rental_property_id,
                "payment_ids",
                existing.formatted_id,
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info(
            "Deleted payment", payment_id=existing.formatted_id, tenant_id=tenant_id
        )
        return True
