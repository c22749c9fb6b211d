"""
Transaction category documents.
"""

from pydantic import Field

from rent_tracker.models.category import TransactionType

from .base import BaseDocument


class TransactionCategory(BaseDocument):
    """Income or expense category, either tenant-defined or a system default"""

    name: str = Field(..., min_length=1, description="Display name")
    description: str | None = None
    transaction_type: TransactionType = Field(
        ..., description="Type of transaction this category classifies"
    )
    is_system_default: bool = False
    user_id: str | None = None
    order: int = Field(default=0, description="Display order")
