"""
Rental payment documents.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import Field, field_validator

from .base import BaseDocument, ensure_utc, utc_now
from .payment_method import PaymentMethod


class RentalPayment(BaseDocument):
    """Rent payment received for a property"""

    rental_property_id: str = Field(default="", description="Owning property id")
    amount: Decimal = Field(..., description="Payment amount")
    payment_date: datetime = Field(default_factory=utc_now)
    payment_method_id: str | None = None
    payment_reference: str | None = None
    notes: str | None = None

    # Resolved on read when requested
    payment_method: PaymentMethod | None = None

    @field_validator("payment_date")
    @classmethod
    def normalize_payment_date(cls, v: datetime) -> datetime:
        return ensure_utc(v)
