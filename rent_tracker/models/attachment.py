"""Attachment metadata table with tenant isolation."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import JSON, BigInteger, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import DocumentModel


class AttachmentType(str, Enum):
    """Kind of entity an attachment belongs to."""

    PROPERTY = "Property"
    PAYMENT = "Payment"


class AttachmentModel(DocumentModel):
    """Attachment row; the file itself lives in file storage."""

    __tablename__ = "attachments"

    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    content_type: Mapped[str] = mapped_column(String(255), nullable=False)
    storage_path: Mapped[str] = mapped_column(String(512), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    entity_type: Mapped[str] = mapped_column(String(32), nullable=False)
    upload_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    tags: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    rental_property_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    rental_payment_id: Mapped[str | None] = mapped_column(String(36), nullable=True)

    __table_args__ = (
        Index("ix_attachments_tenant_property", "tenant_id", "rental_property_id"),
        Index("ix_attachments_tenant_payment", "tenant_id", "rental_payment_id"),
        Index("ix_attachments_tenant_entity_type", "tenant_id", "entity_type"),
        Index("ix_attachments_tenant_updated", "tenant_id", "updated_at"),
    )
