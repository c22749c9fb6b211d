"""
Document identifier helpers and the reserved system tenant.
"""

from __future__ import annotations

import uuid

from rent_tracker.core.exceptions import IdentifierFormatError, ValidationError

# Tenant id owning shared defaults visible to every tenant.
SYSTEM_TENANT_ID = "system"


def new_document_id() -> uuid.UUID:
    """Generate a new globally unique document identifier."""
    return uuid.uuid4()


def parse_document_id(value: str | uuid.UUID) -> uuid.UUID:
    """Parse an identifier string into a UUID.

    Raises:
        IdentifierFormatError: If the value is not a well-formed identifier.
    """
    if isinstance(value, uuid.UUID):
        return value
    if not isinstance(value, str):
        raise IdentifierFormatError(
            f"Invalid identifier format: {value!r}", value=value
        )
    try:
        return uuid.UUID(value.strip())
    except ValueError as exc:
        raise IdentifierFormatError(
            f"Invalid identifier format: {value!r}", value=value
        ) from exc


def canonical_id(value: str | uuid.UUID) -> str:
    """Return the canonical string form used for stored references."""
    return str(parse_document_id(value))


def require_text(value: str | None, field: str) -> str:
    """Reject missing, empty or whitespace-only string arguments."""
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} cannot be null or empty", field=field)
    return value


def require_tenant_id(tenant_id: str | None) -> str:
    """Validate a tenant id argument."""
    return require_text(tenant_id, "tenant_id")


def is_system_tenant(tenant_id: str | None) -> bool:
    """Check whether a tenant id is the reserved system tenant."""
    return tenant_id == SYSTEM_TENANT_ID
