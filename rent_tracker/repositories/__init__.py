"""
Repository layer for tenant-scoped data access.
"""

from .attachment import AttachmentRepository
from .base import SharedRepository, TenantRepository, parse_includes
from .category import TransactionCategoryRepository
from .payment import PaymentRepository
from .payment_method import PaymentMethodRepository
from .property import PropertyRepository
from .transaction import PropertyTransactionRepository

__all__ = [
    "AttachmentRepository",
    "PaymentMethodRepository",
    "PaymentRepository",
    "PropertyRepository",
    "PropertyTransactionRepository",
    "SharedRepository",
    "TenantRepository",
    "TransactionCategoryRepository",
    "parse_includes",
]
