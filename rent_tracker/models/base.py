"""Base tables for multi-tenant documents with typed SQLAlchemy mapping."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all SQLAlchemy models."""


class TimestampMixin:
    """Mixin for created/updated timestamps, stamped by the repository layer."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )


class TenantMixin:
    """Mixin for multi-tenant support."""

    tenant_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)


class VersionMixin:
    """Mixin for the optimistic-concurrency version counter."""

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)


class DocumentModel(Base, TimestampMixin, TenantMixin, VersionMixin):
    """Base table with the common document contract."""

    __abstract__ = True

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
