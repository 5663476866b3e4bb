import math
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


def page_offset(page: int, limit: int) -> int:
    """Number of items to skip for a 1-indexed page."""
    return (page - 1) * limit


class PageMeta(BaseModel):
    """Pagination metadata for list endpoints."""

    total: int = Field(..., description="Total number of matching items across all pages", ge=0)
    page: int = Field(..., description="Current page, 1-indexed", ge=1)
    limit: int = Field(..., description="Maximum items per page", ge=1)
    total_pages: int = Field(..., description="Number of pages for this limit", ge=0)

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "PageMeta":
        return cls(total=total, page=page, limit=limit, total_pages=math.ceil(total / limit))


class Page(BaseModel, Generic[T]):
    """Page of items plus its pagination metadata."""

    data: list[T] = Field(..., description="Items on the current page")
    meta: PageMeta

    @property
    def has_more(self) -> bool:
        """Whether there are pages after the current one."""
        return self.meta.page < self.meta.total_pages
