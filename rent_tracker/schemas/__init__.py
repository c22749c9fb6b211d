"""
Domain documents and request/response schemas.
"""

from .attachment import Attachment, AttachmentType, UploadedFile
from .base import BaseDocument, Include, ensure_utc, utc_now
from .category import TransactionCategory, TransactionType
from .financial import DateRangePeriod, FinancialSummary
from .pagination import PaginatedResponse, PaginationParameters
from .payment import RentalPayment
from .payment_method import PaymentMethod
from .property import Address, LeaseDates, PropertyManager, RentalProperty
from .transaction import PropertyTransaction, PropertyTransactionCreate

__all__ = [
    "Address",
    "Attachment",
    "AttachmentType",
    "BaseDocument",
    "DateRangePeriod",
    "FinancialSummary",
    "Include",
    "LeaseDates",
    "PaginatedResponse",
    "PaginationParameters",
    "PaymentMethod",
    "PropertyManager",
    "PropertyTransaction",
    "PropertyTransactionCreate",
    "RentalPayment",
    "RentalProperty",
    "TransactionCategory",
    "TransactionType",
    "UploadedFile",
]
