"""
Core application modules.
"""

from .config import settings
from .exceptions import (
    ConcurrencyConflictError,
    IdentifierFormatError,
    TenantError,
    ValidationError,
)
from .identifiers import SYSTEM_TENANT_ID, parse_document_id
from .logger import get_logger

__all__ = [
    "SYSTEM_TENANT_ID",
    "ConcurrencyConflictError",
    "IdentifierFormatError",
    "TenantError",
    "ValidationError",
    "get_logger",
    "parse_document_id",
    "settings",
]
