"""
Database tables for tenant-scoped documents.
"""

from .attachment import AttachmentModel, AttachmentType
from .base import Base, DocumentModel, TenantMixin, TimestampMixin, VersionMixin
from .category import TransactionCategoryModel, TransactionType
from .payment import RentalPaymentModel
from .payment_method import PaymentMethodModel
from .property import RentalPropertyModel
from .transaction import PropertyTransactionModel

__all__ = [
    "AttachmentModel",
    "AttachmentType",
    "Base",
    "DocumentModel",
    "PaymentMethodModel",
    "PropertyTransactionModel",
    "RentalPaymentModel",
    "RentalPropertyModel",
    "TenantMixin",
    "TimestampMixin",
    "TransactionCategoryModel",
    "TransactionType",
    "VersionMixin",
]
