"""
Property transaction documents and creation payloads.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from rent_tracker.models.category import TransactionType

from .attachment import Attachment
from .base import BaseDocument, ensure_utc
from .category import TransactionCategory
from .payment_method import PaymentMethod


class PropertyTransaction(BaseDocument):
    """Income or expense recorded against a rental property"""

    rental_property_id: str = Field(default="", description="Owning property id")
    amount: Decimal = Field(..., description="Transaction amount")
    transaction_date: datetime | None = None
    transaction_type: TransactionType = Field(...)
    category_id: str = Field(default="", description="Referenced category id")
    payment_method_id: str | None = None
    reference: str | None = None
    notes: str | None = None
    attachment_ids: list[str] = Field(default_factory=list)

    # Resolved on read when requested
    category: TransactionCategory | None = None
    payment_method: PaymentMethod | None = None
    attachments: list[Attachment] = Field(default_factory=list)

    @field_validator("transaction_date")
    @classmethod
    def normalize_transaction_date(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v)


class PropertyTransactionCreate(BaseModel):
    """Client payload for creating a transaction under a known property"""

    amount: Decimal
    transaction_date: datetime | None = None
    transaction_type: TransactionType
    category_id: str = ""
    payment_method_id: str | None = None
    reference: str | None = None
    notes: str | None = None
    attachment_ids: list[str] = Field(default_factory=list)

    def to_document(self, tenant_id: str, property_id: str) -> PropertyTransaction:
        """Build a transaction document owned by the given tenant and property."""
        return PropertyTransaction(
            tenant_id=tenant_id,
            rental_property_id=property_id,
            **self.model_dump(),
        )
