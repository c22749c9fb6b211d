"""
Attachment service coordinating file storage and attachment metadata.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from rent_tracker.core.exceptions import ValidationError
from rent_tracker.core.identifiers import canonical_id, require_tenant_id
from rent_tracker.core.logger import get_logger
from rent_tracker.models.attachment import AttachmentType
from rent_tracker.repositories.attachment import AttachmentRepository
from rent_tracker.repositories.payment import PaymentRepository
from rent_tracker.repositories.property import PropertyRepository
from rent_tracker.schemas.attachment import Attachment, UploadedFile

from .storage import ALLOWED_FILE_TYPES, FileStorageService

logger = get_logger()


class AttachmentService:
    """Service for files attached to properties and payments."""

    def __init__(
        self, session: AsyncSession, storage: FileStorageService | None = None
    ) -> None:
        self.session = session
        self.storage = storage or FileStorageService()
        self.attachment_repo = AttachmentRepository(session)
        self.property_repo = PropertyRepository(session)
        self.payment_repo = PaymentRepository(session)

    async def _require_parent(
        self, tenant_id: str, attachment_type: AttachmentType, parent_id: str | UUID
    ) -> None:
        if attachment_type == AttachmentType.PROPERTY:
            parent = await self.property_repo.get_by_id(tenant_id, parent_id)
            label = "Property"
        else:
            parent = await self.payment_repo.get_by_id(tenant_id, parent_id)
            label = "Payment"
        if parent is None:
            raise ValidationError(
                f"{label} with ID {parent_id} not found.", field="parent_id"
            )

    async def save_attachment(
        self,
        tenant_id: str,
        upload: UploadedFile,
        attachment_type: AttachmentType,
        parent_id: str | UUID,
        description: str | None = None,
        tags: list[str] | None = None,
    ) -> Attachment:
        """Store an uploaded file and record it against its parent.

        The parent must exist and the file type must be allowed. Property
        attachments are also listed on the property's attachment ids.
        """
        require_tenant_id(tenant_id)
        if upload is None:
            raise ValidationError("file cannot be null", field="file")
        attachment_type = AttachmentType(attachment_type)
        parent_key = canonical_id(parent_id)

        await self._require_parent(tenant_id, attachment_type, parent_key)

        if not self.storage.validate_file_type(upload.content_type, upload.file_name):
            raise ValidationError(
                f"File type not allowed. Content-Type: {upload.content_type}. "
                f"Allowed file types: {', '.join(ALLOWED_FILE_TYPES)}",
                field="file",
            )

        storage_path = await self.storage.upload_file(upload)
        attachment = Attachment(
            tenant_id=tenant_id,
            file_name=upload.file_name,
            content_type=upload.content_type,
            storage_path=storage_path,
            file_size=upload.size,
            description=description,
            tags=tags,
            entity_type=attachment_type.value,
            rental_property_id=(
                parent_key if attachment_type == AttachmentType.PROPERTY else None
            ),
            rental_payment_id=(
                parent_key if attachment_type == AttachmentType.PAYMENT else None
            ),
        )

        try:
            created = await self.attachment_repo.create(attachment)
            if attachment_type == AttachmentType.PROPERTY:
                await self.property_repo.add_child_id(
                    tenant_id, parent_key, "attachment_ids", created.formatted_id
                )
            await self.session.commit()
        except Exception:
            # Record failed, the stored file has no owner
            await self.session.rollback()
            await self.storage.delete_file(storage_path)
            raise

        logger.info(
            "Attachment saved",
            attachment_id=created.formatted_id,
            file_name=created.file_name,
            tenant_id=tenant_id,
        )
        return created

    async def download_attachment(
        self, tenant_id: str, attachment_id: str | UUID
    ) -> tuple[bytes, str, str]:
        """Return (content, content_type, file_name) for an attachment.

        Raises:
            FileNotFoundError: If the attachment or its file does not exist.
        """
        attachment = await self.attachment_repo.get_by_id(tenant_id, attachment_id)
        if attachment is None:
            raise FileNotFoundError(f"Attachment with ID {attachment_id} not found.")

        content = await self.storage.download_file(attachment.storage_path)
        return content, attachment.content_type, attachment.file_name

    async def delete_attachment(
        self, tenant_id: str, attachment_id: str | UUID
    ) -> bool:
        """Delete an attachment's file and record; False if it does not exist."""
        attachment = await self.attachment_repo.get_by_id(tenant_id, attachment_id)
        if attachment is None:
            return False

        try:
            await self.attachment_repo.delete(tenant_id, attachment.id)
            if attachment.rental_property_id:
                await self.property_repo.remove_child_id(
                    tenant_id,
                    attachment.rental_property_id,
                    "attachment_ids",
                    attachment.formatted_id,
                )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        # File goes only once the record is gone
        await self.storage.delete_file(attachment.storage_path)

        logger.info(
            "Attachment deleted",
            attachment_id=attachment.formatted_id,
            tenant_id=tenant_id,
        )
        return True

    async def get_attachments_for_entity(
        self,
        tenant_id: str,
        attachment_type: AttachmentType,
        entity_id: str | UUID,
    ) -> list[Attachment]:
        attachment_type = AttachmentType(attachment_type)
        if attachment_type == AttachmentType.PROPERTY:
            return await self.attachment_repo.get_by_property_id(tenant_id, entity_id)
        return await self.attachment_repo.get_by_payment_id(tenant_id, entity_id)
