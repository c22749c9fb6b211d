"""
Document contract shared by every tenant-scoped entity.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Normalize a datetime to UTC.

    Naive values are labelled UTC without shifting the wall clock; aware
    values are converted.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class Include(str, Enum):
    """Related documents that can be resolved onto a read result"""

    PAYMENT_METHOD = "PaymentMethod"
    CATEGORY = "Category"
    ATTACHMENTS = "Attachments"


class BaseDocument(BaseModel):
    """Base document with identity, tenant, timestamps and version"""

    model_config = ConfigDict(from_attributes=True)

    id: UUID | None = Field(None, description="Document identifier")
    tenant_id: str = Field(default="", description="Owning tenant identifier")
    created_at: datetime | None = Field(None, description="Creation timestamp (UTC)")
    updated_at: datetime | None = Field(
        None, description="Last successful write timestamp (UTC)"
    )
    version: int = Field(default=1, ge=1, description="Optimistic concurrency token")

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_timestamps(cls, v: datetime | None) -> datetime | None:
        """Store timestamps in UTC"""
        return ensure_utc(v)

    @property
    def formatted_id(self) -> str:
        """Canonical string form of the identifier, empty when unassigned."""
        return str(self.id) if self.id else ""
