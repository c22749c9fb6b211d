"""
Application services.
"""

from .attachment import AttachmentService
from .payment import PaymentService
from .property import PropertyService
from .seeding import seed_system_defaults
from .storage import FileStorageService
from .tenant_context import TenantContext
from .transaction import PropertyTransactionService

__all__ = [
    "AttachmentService",
    "FileStorageService",
    "PaymentService",
    "PropertyService",
    "PropertyTransactionService",
    "TenantContext",
    "seed_system_defaults",
]
