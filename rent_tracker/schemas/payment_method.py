"""
Payment method documents.
"""

from pydantic import Field

from .base import BaseDocument


class PaymentMethod(BaseDocument):
    """Payment method, either tenant-defined or a system default"""

    name: str = Field(..., min_length=1, description="Display name")
    description: str | None = None
    is_system_default: bool = False
    user_id: str | None = None
