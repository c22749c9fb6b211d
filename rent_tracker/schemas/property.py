"""
Rental property documents.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .base import BaseDocument, ensure_utc


class Address(BaseModel):
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""


class LeaseDates(BaseModel):
    start_date: datetime | None = None
    end_date: datetime | None = None

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v)


class PropertyManager(BaseModel):
    name: str | None = None
    contact: str | None = None


class RentalProperty(BaseDocument):
    """Rental property owned by a tenant"""

    user_id: str | None = Field(None, description="Owning user identifier")
    address: Address = Field(default_factory=Address)
    description: str | None = None
    rent_amount: Decimal = Field(
        default=Decimal("0"), ge=0, description="Weekly rent amount"
    )
    lease_dates: LeaseDates = Field(default_factory=LeaseDates)
    property_manager: PropertyManager = Field(default_factory=PropertyManager)

    # Child references maintained by the services, never by clients
    payment_ids: list[str] = Field(default_factory=list)
    transaction_ids: list[str] = Field(default_factory=list)
    attachment_ids: list[str] = Field(default_factory=list)

    attributes: dict[str, Any] = Field(default_factory=dict)
