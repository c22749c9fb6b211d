"""
Payment method repository.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from rent_tracker.models.payment_method import PaymentMethodModel
from rent_tracker.schemas.payment_method import PaymentMethod

from .base import SharedRepository


class PaymentMethodRepository(SharedRepository[PaymentMethod]):
    """Payment methods, tenant-defined or system defaults."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PaymentMethodModel, PaymentMethod)
