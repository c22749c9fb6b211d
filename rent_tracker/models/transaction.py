"""Property transaction table with tenant isolation."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, DateTime, Index, Numeric, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from .base import DocumentModel
from .category import TransactionType


class PropertyTransactionModel(DocumentModel):
    """Income or expense row recorded against a rental property."""

    __tablename__ = "property_transactions"

    rental_property_id: Mapped[str] = mapped_column(String(36), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    transaction_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    transaction_type: Mapped[TransactionType] = mapped_column(
        SQLEnum(TransactionType, name="transactiontype"), nullable=False
    )
    category_id: Mapped[str] = mapped_column(String(36), nullable=False)
    payment_method_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    reference: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    attachment_ids: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=list
    )

    __table_args__ = (
        Index(
            "ix_property_transactions_tenant_property",
            "tenant_id",
            "rental_property_id",
        ),
        Index("ix_property_transactions_category", "category_id"),
        Index("ix_property_transactions_type", "transaction_type"),
        Index("ix_property_transactions_date", "transaction_date"),
    )
