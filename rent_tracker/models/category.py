"""Transaction category table; shared between tenants and the system tenant."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Boolean, Index, Integer, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from .base import DocumentModel


class TransactionType(str, Enum):
    """Direction of a property transaction."""

    INCOME = "Income"
    EXPENSE = "Expense"


class TransactionCategoryModel(DocumentModel):
    """Transaction category row."""

    __tablename__ = "transaction_categories"

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    transaction_type: Mapped[TransactionType] = mapped_column(
        SQLEnum(TransactionType, name="transactiontype"), nullable=False
    )
    is_system_default: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("ix_transaction_categories_tenant_type", "tenant_id", "transaction_type"),
    )
