"""
Property search service.
Runs a filter through predicate construction, pagination and projection.
"""

from property_finder.schemas.page import PageResult
from property_finder.schemas.property import PropertyFilter, PropertySummary
from property_finder.search.pagination import PropertyStore, paginate
from property_finder.search.predicates import build_predicate
from property_finder.search.projector import to_summary


class PropertySearchService:
    """
    Read-only search over a property store.
    """

    def __init__(self, store: PropertyStore):
        self.store = store

    async def search(self, filters: PropertyFilter) -> PageResult[PropertySummary]:
        """
        Find one page of properties matching ``filters``.

        Args:
            filters: Search criteria including page and page size

        Returns:
            Page of property summaries, newest first, with the total number
            of matches across all pages

        Raises:
            InvalidFilterError: If page or page size is below 1
            StorageUnavailableError: If the store cannot be read
        """
        predicate = build_predicate(filters)
        page = await paginate(self.store, predicate, filters.page, filters.page_size)
        return page.map(to_summary)
