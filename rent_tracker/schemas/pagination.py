"""
Paging parameters and paged result envelope.
"""

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, Field, field_validator

from rent_tracker.core.config import settings

T = TypeVar("T")


class PaginationParameters(BaseModel):
    """Paging, search and sort options for list queries"""

    page_number: int = Field(default=1, description="1-based page number")
    page_size: int = Field(default=settings.DEFAULT_PAGE_SIZE)
    search_term: str | None = None
    sort_field: str | None = None
    sort_descending: bool = False

    @field_validator("page_number")
    @classmethod
    def clamp_page_number(cls, v: int) -> int:
        return max(1, v)

    @field_validator("page_size")
    @classmethod
    def clamp_page_size(cls, v: int) -> int:
        """Non-positive sizes fall back to the default; large ones are capped"""
        if v <= 0:
            return settings.DEFAULT_PAGE_SIZE
        return min(v, settings.MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of results with navigation metadata"""

    items: list[T] = Field(default_factory=list)
    total_count: int = 0
    page_number: int = 1
    total_pages: int = 0
    has_next_page: bool = False
    has_previous_page: bool = False

    @classmethod
    def create(
        cls, items: list[T], total_count: int, page_number: int, page_size: int
    ) -> "PaginatedResponse[T]":
        total_pages = math.ceil(total_count / page_size) if page_size else 0
        return cls(
            items=items,
            total_count=total_count,
            page_number=page_number,
            total_pages=total_pages,
            has_next_page=page_number < total_pages,
            has_previous_page=page_number > 1,
        )
