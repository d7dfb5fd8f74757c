"""
Filtered property search: predicates, pagination and view projection.
"""

from property_finder.search.snapshots import PropertySnapshot, snapshot_properties
from property_finder.search.predicates import (
    PropertyPredicate,
    ComparisonClause,
    FeatureSupersetClause,
    build_predicate,
)
from property_finder.search.pagination import PropertyStore, InMemoryPropertyStore, paginate
from property_finder.search.projector import to_summary, to_detail, primary_image_url

__all__ = [
    "PropertySnapshot",
    "snapshot_properties",
    "PropertyPredicate",
    "ComparisonClause",
    "FeatureSupersetClause",
    "build_predicate",
    "PropertyStore",
    "InMemoryPropertyStore",
    "paginate",
    "to_summary",
    "to_detail",
    "primary_image_url",
]
