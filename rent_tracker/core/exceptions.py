"""Application-specific exceptions."""

from typing import Any


class ValidationError(Exception):
    """Domain-specific validation error."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
        status_code: int = 422,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details or {}
        self.status_code = status_code

    def __repr__(self) -> str:
        """Return detailed string representation for logging and debugging."""
        field_info = f", field={self.field!r}" if self.field else ""
        return f"ValidationError(message={self.message!r}{field_info}, status_code={self.status_code})"


class IdentifierFormatError(Exception):
    """Raised when a document identifier string is not a valid identifier."""

    def __init__(
        self,
        message: str,
        value: object = None,
        details: dict[str, Any] | None = None,
        status_code: int = 400,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.value = value
        self.details = details or {}
        self.status_code = status_code

    def __repr__(self) -> str:
        """Return detailed string representation for logging and debugging."""
        return f"IdentifierFormatError(message={self.message!r}, value={self.value!r}, status_code={self.status_code})"


class ConcurrencyConflictError(Exception):
    """Raised when a versioned update matched no stored document."""

    def __init__(
        self,
        message: str,
        entity_type: str | None = None,
        entity_id: str | None = None,
        expected_version: int | None = None,
        details: dict[str, Any] | None = None,
        status_code: int = 409,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.expected_version = expected_version
        self.details = details or {}
        self.status_code = status_code

    def __repr__(self) -> str:
        """Return detailed string representation for logging and debugging."""
        return (
            f"ConcurrencyConflictError(message={self.message!r}, "
            f"entity_type={self.entity_type!r}, entity_id={self.entity_id!r}, "
            f"expected_version={self.expected_version!r}, status_code={self.status_code})"
        )


class TenantError(Exception):
    """Domain-specific tenant-related error."""

    def __init__(
        self,
        message: str,
        tenant_id: str | None = None,
        details: dict[str, Any] | None = None,
        status_code: int = 401,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.tenant_id = tenant_id
        self.details = details or {}
        self.status_code = status_code

    def __repr__(self) -> str:
        """Return detailed string representation for logging and debugging."""
        tenant_info = f", tenant_id={self.tenant_id!r}" if self.tenant_id else ""
        return f"TenantError(message={self.message!r}{tenant_info}, status_code={self.status_code})"
