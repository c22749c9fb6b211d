"""
Tests for attachment metadata queries.
"""

import uuid

import pytest

from rent_tracker.core.exceptions import IdentifierFormatError, ValidationError
from rent_tracker.repositories.attachment import AttachmentRepository
from rent_tracker.schemas import Attachment

from conftest import OTHER_TENANT_ID, TENANT_ID


def build_attachment(**overrides) -> Attachment:
    data = {
        "tenant_id": TENANT_ID,
        "file_name": "lease.pdf",
        "content_type": "application/pdf",
        "storage_path": "lease.pdf",
        "file_size": 1024,
    }
    data.update(overrides)
    return Attachment(**data)


class TestAttachmentRepository:
    """Test AttachmentRepository functionality."""

    @pytest.mark.asyncio
    async def test_filters_by_owner(self, test_session) -> None:
        """Test lookups by owning property, payment and entity type."""
        repo = AttachmentRepository(test_session)
        property_id = str(uuid.uuid4())
        payment_id = str(uuid.uuid4())
        lease = await repo.create(
            build_attachment(entity_type="Property", rental_property_id=property_id)
        )
        receipt = await repo.create(
            build_attachment(
                file_name="receipt.pdf",
                entity_type="Payment",
                rental_payment_id=payment_id,
            )
        )
        await repo.create(
            build_attachment(
                tenant_id=OTHER_TENANT_ID,
                entity_type="Property",
                rental_property_id=property_id,
            )
        )

        by_property = await repo.get_by_property_id(TENANT_ID, property_id)
        by_payment = await repo.get_by_payment_id(TENANT_ID, uuid.UUID(payment_id))
        by_type = await repo.get_by_entity_type(TENANT_ID, "Payment")

        assert [a.id for a in by_property] == [lease.id]
        assert [a.id for a in by_payment] == [receipt.id]
        assert [a.id for a in by_type] == [receipt.id]

    @pytest.mark.asyncio
    async def test_tags_round_trip(self, test_session) -> None:
        """Test that tags are stored and read back."""
        repo = AttachmentRepository(test_session)
        created = await repo.create(build_attachment(tags=["lease", "2024"]))

        fetched = await repo.get_by_id(TENANT_ID, created.id)

        assert fetched.tags == ["lease", "2024"]
        assert fetched.upload_date.tzinfo is not None

    @pytest.mark.asyncio
    async def test_entity_type_required(self, test_session) -> None:
        """Test that an empty entity type is rejected."""
        repo = AttachmentRepository(test_session)

        with pytest.raises(ValidationError):
            await repo.get_by_entity_type(TENANT_ID, "")

    @pytest.mark.asyncio
    async def test_malformed_owner_id(self, test_session) -> None:
        """Test that a malformed owner id raises a format error."""
        repo = AttachmentRepository(test_session)

        with pytest.raises(IdentifierFormatError):
            await repo.get_by_property_id(TENANT_ID, "bad")
