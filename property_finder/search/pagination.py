"""
Pagination over property stores.

``PropertyStore`` is the read contract the search pipeline depends on. Any
implementation must count and fetch the same filtered set, fetch in
newest-first order (``created_at`` descending, then ``id`` descending) and
return an empty list rather than fail when the offset is past the end.
"""

from abc import ABC, abstractmethod
from property_finder.schemas.page import PageResult
from property_finder.search.predicates import PropertyPredicate
from property_finder.search.snapshots import PropertySnapshot
from property_finder.utils.exceptions import InvalidFilterError
from typing import Iterable, List


class PropertyStore(ABC):
    """Read access to properties for the search pipeline."""

    @abstractmethod
    async def count_matching(self, predicate: PropertyPredicate) -> int:
        """Number of properties satisfying ``predicate``."""

    @abstractmethod
    async def fetch_matching(
        self,
        predicate: PropertyPredicate,
        offset: int,
        limit: int
    ) -> List[PropertySnapshot]:
        """Matching properties in listing order, sliced by ``offset``/``limit``."""


def listing_order_key(snapshot: PropertySnapshot):
    """Sort key giving newest-first order with id as tiebreak."""
    return (snapshot.created_at, snapshot.id)


class InMemoryPropertyStore(PropertyStore):
    """
    Store over an in-memory collection of snapshots.

    Filters, sorts and slices in Python. Used as the reference behaviour for
    the SQL-backed repository and by tests that need no database.
    """

    def __init__(self, snapshots: Iterable[PropertySnapshot] = ()):
        self._snapshots = tuple(snapshots)

    def _matching(self, predicate: PropertyPredicate) -> List[PropertySnapshot]:
        return [snapshot for snapshot in self._snapshots if predicate.matches(snapshot)]

    async def count_matching(self, predicate: PropertyPredicate) -> int:
        return len(self._matching(predicate))

    async def fetch_matching(
        self,
        predicate: PropertyPredicate,
        offset: int,
        limit: int
    ) -> List[PropertySnapshot]:
        ordered = sorted(self._matching(predicate), key=listing_order_key, reverse=True)
        return ordered[offset:offset + limit]


async def paginate(
    store: PropertyStore,
    predicate: PropertyPredicate,
    page: int,
    page_size: int
) -> PageResult[PropertySnapshot]:
    """
    Fetch one page of the properties matching ``predicate``.

    Args:
        store: Property store to read from
        predicate: Filter to apply before counting and slicing
        page: 1-based page number
        page_size: Maximum number of items on the page

    Returns:
        PageResult holding the page items and the total match count. A page
        past the end has no items but still reports the full total.

    Raises:
        InvalidFilterError: If page or page_size is below 1
    """
    if page < 1:
        raise InvalidFilterError(f"page must be at least 1, got {page}")
    if page_size < 1:
        raise InvalidFilterError(f"page_size must be at least 1, got {page_size}")

    total_count = await store.count_matching(predicate)
    offset = (page - 1) * page_size
    # Past the last match there is nothing to fetch
    if offset >= total_count:
        items = []
    else:
        items = await store.fetch_matching(predicate, offset, page_size)

    return PageResult[PropertySnapshot](
        items=items,
        total_count=total_count,
        page=page,
        page_size=page_size,
    )
