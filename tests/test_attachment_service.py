"""
Tests for the attachment service.
"""

import uuid
from datetime import UTC, datetime
from decimal import Decimal

import pytest

from rent_tracker.core.exceptions import ConcurrencyConflictError, ValidationError
from rent_tracker.models import AttachmentType
from rent_tracker.repositories.attachment import AttachmentRepository
from rent_tracker.repositories.payment import PaymentRepository
from rent_tracker.repositories.property import PropertyRepository
from rent_tracker.schemas import RentalPayment, UploadedFile
from rent_tracker.services.attachment import AttachmentService

from conftest import OTHER_TENANT_ID, TENANT_ID, race_property_writes


def lease_pdf() -> UploadedFile:
    return UploadedFile(
        file_name="lease.pdf",
        content_type="application/pdf",
        content=b"%PDF-1.4 lease agreement",
    )


@pytest.fixture
async def rental_payment(test_session, rental_property) -> RentalPayment:
    return await PaymentRepository(test_session).create(
        RentalPayment(
            tenant_id=TENANT_ID,
            rental_property_id=rental_property.formatted_id,
            amount=Decimal("650.00"),
            payment_date=datetime(2024, 3, 1, tzinfo=UTC),
        )
    )


class TestSaveAttachment:
    """Test storing attachments."""

    @pytest.mark.asyncio
    async def test_save_property_attachment(
        self, test_session, storage, rental_property
    ) -> None:
        """Test that the file is stored and the property lists the attachment."""
        service = AttachmentService(test_session, storage)

        attachment = await service.save_attachment(
            TENANT_ID,
            lease_pdf(),
            AttachmentType.PROPERTY,
            rental_property.id,
            description="Signed lease",
            tags=["lease", "2024"],
        )

        assert attachment.version == 1
        assert attachment.file_size == len(b"%PDF-1.4 lease agreement")
        assert attachment.entity_type == "Property"
        assert attachment.rental_property_id == rental_property.formatted_id
        assert attachment.rental_payment_id is None
        assert (storage.root / attachment.storage_path).is_file()

        stored_property = await PropertyRepository(test_session).get_by_id(
            TENANT_ID, rental_property.id
        )
        assert stored_property.attachment_ids == [attachment.formatted_id]

    @pytest.mark.asyncio
    async def test_save_payment_attachment(
        self, test_session, storage, rental_property, rental_payment
    ) -> None:
        """Test that payment attachments reference the payment only."""
        service = AttachmentService(test_session, storage)

        attachment = await service.save_attachment(
            TENANT_ID,
            UploadedFile(
                file_name="receipt.png", content_type="image/png", content=b"\x89PNG"
            ),
            AttachmentType.PAYMENT,
            rental_payment.formatted_id,
        )

        assert attachment.entity_type == "Payment"
        assert attachment.rental_payment_id == rental_payment.formatted_id
        assert attachment.rental_property_id is None

        stored_property = await PropertyRepository(test_session).get_by_id(
            TENANT_ID, rental_property.id
        )
        assert stored_property.attachment_ids == []

    @pytest.mark.asyncio
    async def test_missing_parent(self, test_session, storage) -> None:
        """Test that the parent entity must exist."""
        service = AttachmentService(test_session, storage)

        with pytest.raises(ValidationError) as exc_info:
            await service.save_attachment(
                TENANT_ID, lease_pdf(), AttachmentType.PROPERTY, uuid.uuid4()
            )

        assert exc_info.value.field == "parent_id"
        assert list(storage.root.iterdir()) == []

    @pytest.mark.asyncio
    async def test_parent_of_other_tenant(
        self, test_session, storage, rental_property
    ) -> None:
        """Test that another tenant's property cannot receive attachments."""
        service = AttachmentService(test_session, storage)

        with pytest.raises(ValidationError):
            await service.save_attachment(
                OTHER_TENANT_ID,
                lease_pdf(),
                AttachmentType.PROPERTY,
                rental_property.id,
            )

    @pytest.mark.asyncio
    async def test_disallowed_type(
        self, test_session, storage, rental_property
    ) -> None:
        """Test that disallowed file types are rejected before storage."""
        service = AttachmentService(test_session, storage)
        upload = UploadedFile(
            file_name="script.exe",
            content_type="application/octet-stream",
            content=b"MZ",
        )

        with pytest.raises(ValidationError):
            await service.save_attachment(
                TENANT_ID, upload, AttachmentType.PROPERTY, rental_property.id
            )

        assert list(storage.root.iterdir()) == []
        assert await AttachmentRepository(test_session).count(TENANT_ID) == 0


class TestReadAndDelete:
    """Test downloading, listing and deleting attachments."""

    @pytest.mark.asyncio
    async def test_download_attachment(
        self, test_session, storage, rental_property
    ) -> None:
        service = AttachmentService(test_session, storage)
        attachment = await service.save_attachment(
            TENANT_ID, lease_pdf(), AttachmentType.PROPERTY, rental_property.id
        )

        content, content_type, file_name = await service.download_attachment(
            TENANT_ID, attachment.id
        )

        assert content == b"%PDF-1.4 lease agreement"
        assert content_type == "application/pdf"
        assert file_name == "lease.pdf"

    @pytest.mark.asyncio
    async def test_download_missing_attachment(self, test_session, storage) -> None:
        service = AttachmentService(test_session, storage)

        with pytest.raises(FileNotFoundError):
            await service.download_attachment(TENANT_ID, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_download_is_tenant_scoped(
        self, test_session, storage, rental_property
    ) -> None:
        service = AttachmentService(test_session, storage)
        attachment = await service.save_attachment(
            TENANT_ID, lease_pdf(), AttachmentType.PROPERTY, rental_property.id
        )

        with pytest.raises(FileNotFoundError):
            await service.download_attachment(OTHER_TENANT_ID, attachment.id)

    @pytest.mark.asyncio
    async def test_delete_attachment(
        self, test_session, storage, rental_property
    ) -> None:
        """Test that delete removes the file, the record and the property link."""
        service = AttachmentService(test_session, storage)
        attachment = await service.save_attachment(
            TENANT_ID, lease_pdf(), AttachmentType.PROPERTY, rental_property.id
        )

        assert await service.delete_attachment(TENANT_ID, attachment.id) is True

        assert not (storage.root / attachment.storage_path).exists()
        assert await AttachmentRepository(test_session).get_by_id(
            TENANT_ID, attachment.id
        ) is None
        stored_property = await PropertyRepository(test_session).get_by_id(
            TENANT_ID, rental_property.id
        )
        assert stored_property.attachment_ids == []

    @pytest.mark.asyncio
    async def test_delete_missing_attachment(self, test_session, storage) -> None:
        service = AttachmentService(test_session, storage)

        assert await service.delete_attachment(TENANT_ID, uuid.uuid4()) is False

    @pytest.mark.asyncio
    async def test_get_attachments_for_entity(
        self, test_session, storage, rental_property, rental_payment
    ) -> None:
        """Test listing attachments by owning entity."""
        service = AttachmentService(test_session, storage)
        lease = await service.save_attachment(
            TENANT_ID, lease_pdf(), AttachmentType.PROPERTY, rental_property.id
        )
        receipt = await service.save_attachment(
            TENANT_ID,
            UploadedFile(file_name="receipt.txt", content_type="text/plain", content=b"ok"),
            AttachmentType.PAYMENT,
            rental_payment.id,
        )

        for_property = await service.get_attachments_for_entity(
            TENANT_ID, AttachmentType.PROPERTY, rental_property.id
        )
        for_payment = await service.get_attachments_for_entity(
            TENANT_ID, "Payment", rental_payment.formatted_id
        )

        assert [a.id for a in for_property] == [lease.id]
        assert [a.id for a in for_payment] == [receipt.id]


class TestAttachmentWriteFailures:
    """Test cleanup when recording an attachment fails."""

    @pytest.mark.asyncio
    async def test_link_conflict_removes_stored_file(
        self, test_session, storage, rental_property, monkeypatch
    ) -> None:
        """Test that the file and record are dropped when the property link fails."""
        await test_session.commit()
        service = AttachmentService(test_session, storage)
        race_property_writes(monkeypatch, service.property_repo)

        with pytest.raises(ConcurrencyConflictError):
            await service.save_attachment(
                TENANT_ID, lease_pdf(), AttachmentType.PROPERTY, rental_property.id
            )

        assert list(storage.root.iterdir()) == []
        assert not test_session.in_transaction()
        await test_session.commit()
        assert await AttachmentRepository(test_session).count(TENANT_ID) == 0
        stored_property = await PropertyRepository(test_session).get_by_id(
            TENANT_ID, rental_property.id
        )
        assert stored_property.attachment_ids == []

    @pytest.mark.asyncio
    async def test_delete_conflict_keeps_file(
        self, test_session, storage, rental_property, monkeypatch
    ) -> None:
        """Test that a failed delete leaves both the record and its file."""
        service = AttachmentService(test_session, storage)
        attachment = await service.save_attachment(
            TENANT_ID, lease_pdf(), AttachmentType.PROPERTY, rental_property.id
        )
        race_property_writes(monkeypatch, service.property_repo)

        with pytest.raises(ConcurrencyConflictError):
            await service.delete_attachment(TENANT_ID, attachment.id)

        assert (storage.root / attachment.storage_path).is_file()
        content, _, _ = await service.download_attachment(TENANT_ID, attachment.id)
        assert content == b"%PDF-1.4 lease agreement"
