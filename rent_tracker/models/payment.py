"""Rental payment table with tenant isolation."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import DocumentModel


class RentalPaymentModel(DocumentModel):
    """Rental payment row."""

    __tablename__ = "rental_payments"

    rental_property_id: Mapped[str] = mapped_column(String(36), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payment_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    payment_method_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    payment_reference: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_rental_payments_tenant_property", "tenant_id", "rental_property_id"),
        Index("ix_rental_payments_tenant_date", "tenant_id", "payment_date"),
    )
