"""
Attachment metadata and upload payloads.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from rent_tracker.models.attachment import AttachmentType

from .base import BaseDocument, ensure_utc, utc_now


class Attachment(BaseDocument):
    """Metadata for a stored file linked to a property or payment"""

    file_name: str = Field(..., description="Original file name")
    content_type: str = Field(..., description="MIME type supplied at upload")
    storage_path: str = Field(..., description="Path relative to the upload root")
    file_size: int = Field(default=0, ge=0)
    description: str | None = None
    entity_type: str = Field(
        default=AttachmentType.PROPERTY.value, description="Owning entity kind"
    )
    upload_date: datetime = Field(default_factory=utc_now)
    tags: list[str] | None = None
    rental_property_id: str | None = None
    rental_payment_id: str | None = None

    @field_validator("upload_date")
    @classmethod
    def normalize_upload_date(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class UploadedFile(BaseModel):
    """File received from a client, prior to storage"""

    file_name: str
    content_type: str
    content: bytes = b""

    @property
    def size(self) -> int:
        return len(self.content)
