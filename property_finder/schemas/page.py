"""
Generic page of results shared by the search pipeline and the API layer.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Callable, Generic, List, TypeVar
import math

T = TypeVar("T")
U = TypeVar("U")


class PageResult(BaseModel, Generic[T]):
    """
    One page of an ordered result set.

    ``total_count`` counts every match across all pages, so it stays the same
    whichever page is requested; ``items`` never holds more than ``page_size``
    entries.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    items: List[T] = Field(default_factory=list, description="Items on this page, in result order")
    total_count: int = Field(..., ge=0, description="Number of matches across all pages")
    page: int = Field(..., ge=1, description="1-based page number")
    page_size: int = Field(..., ge=1, description="Maximum number of items per page")

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.total_count else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    def map(self, fn: Callable[[T], U]) -> "PageResult[U]":
        """Project every item with ``fn``, keeping the paging fields."""
        return PageResult(
            items=[fn(item) for item in self.items],
            total_count=self.total_count,
            page=self.page,
            page_size=self.page_size,
        )
