"""Payment method table; shared between tenants and the system tenant."""

from __future__ import annotations

from sqlalchemy import Boolean, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import DocumentModel


class PaymentMethodModel(DocumentModel):
    """Payment method row."""

    __tablename__ = "payment_methods"

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_system_default: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    __table_args__ = (Index("ix_payment_methods_tenant_name", "tenant_id", "name"),)
