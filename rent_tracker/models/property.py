"""Rental property table with tenant isolation."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, DateTime, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import DocumentModel


class RentalPropertyModel(DocumentModel):
    """Rental property row; address, lease and manager are flattened."""

    __tablename__ = "rental_properties"

    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    street: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    city: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    state: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    zip_code: Mapped[str] = mapped_column(String(20), nullable=False, default="")

    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    rent_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )

    lease_start_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    lease_end_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    property_manager_name: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    property_manager_contact: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )

    # Server-owned child references
    payment_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    transaction_ids: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=list
    )
    attachment_ids: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=list
    )

    attributes: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )

    __table_args__ = (
        Index("ix_rental_properties_tenant_city", "tenant_id", "city"),
        Index("ix_rental_properties_tenant_rent", "tenant_id", "rent_amount"),
        Index(
            "ix_rental_properties_tenant_lease",
            "tenant_id",
            "lease_start_date",
            "lease_end_date",
        ),
        Index("ix_rental_properties_tenant_updated", "tenant_id", "updated_at"),
    )
