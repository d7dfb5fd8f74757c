"""
Query construction for property search.

A ``PropertyPredicate`` is a conjunction of independent clauses. Each clause
can be evaluated against an in-memory ``PropertySnapshot`` or rendered as a
SQLAlchemy boolean expression over the ``properties`` table, with the same
semantics either way.
"""

from abc import ABC, abstractmethod
from sqlalchemy import and_, func, select, true
from sqlalchemy.sql.elements import ColumnElement
from property_finder.models.lookup import property_features
from property_finder.models.property import Property
from property_finder.search.snapshots import PropertySnapshot
from typing import Any, FrozenSet, Iterator, Tuple
import operator


# Operator name -> (python comparison, column comparison)
_OPERATORS = {
    "ge": (operator.ge, lambda column, value: column >= value),
    "le": (operator.le, lambda column, value: column <= value),
    "eq": (operator.eq, lambda column, value: column == value),
}


class PropertyClause(ABC):
    """Single filter condition over a property."""

    @abstractmethod
    def matches(self, snapshot: PropertySnapshot) -> bool:
        """Evaluate the clause against a loaded snapshot."""

    @abstractmethod
    def condition(self) -> ColumnElement:
        """Render the clause as a boolean expression over ``properties``."""


class ComparisonClause(PropertyClause):
    """
    Compare one scalar column of a property with a fixed value.

    A property whose column is null never matches.
    """

    def __init__(self, field: str, op: str, value: Any):
        if op not in _OPERATORS:
            raise ValueError(f"Unsupported comparison operator: {op}")
        self.field = field
        self.op = op
        self.value = value

    def matches(self, snapshot: PropertySnapshot) -> bool:
        actual = getattr(snapshot, self.field)
        if actual is None:
            return False
        compare, _ = _OPERATORS[self.op]
        return compare(actual, self.value)

    def condition(self) -> ColumnElement:
        _, compare = _OPERATORS[self.op]
        return compare(getattr(Property, self.field), self.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ComparisonClause):
            return NotImplemented
        return (self.field, self.op, self.value) == (other.field, other.op, other.value)

    def __hash__(self) -> int:
        return hash((self.field, self.op, self.value))

    def __repr__(self) -> str:
        return f"ComparisonClause({self.field} {self.op} {self.value!r})"


class FeatureSupersetClause(PropertyClause):
    """The property carries every one of the required features."""

    def __init__(self, feature_ids: FrozenSet[int]):
        self.feature_ids = frozenset(feature_ids)

    def matches(self, snapshot: PropertySnapshot) -> bool:
        return self.feature_ids <= snapshot.feature_ids

    def condition(self) -> ColumnElement:
        # Count the requested features linked to the outer property row
        linked = (
            select(func.count(property_features.c.feature_id))
            .where(
                and_(
                    property_features.c.property_id == Property.id,
                    property_features.c.feature_id.in_(sorted(self.feature_ids)),
                )
            )
            .correlate(Property)
            .scalar_subquery()
        )
        return linked == len(self.feature_ids)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FeatureSupersetClause):
            return NotImplemented
        return self.feature_ids == other.feature_ids

    def __hash__(self) -> int:
        return hash(self.feature_ids)

    def __repr__(self) -> str:
        return f"FeatureSupersetClause({sorted(self.feature_ids)})"


class PropertyPredicate:
    """
    Conjunction of property clauses. An empty predicate matches everything.
    """

    def __init__(self, clauses: Tuple[PropertyClause, ...] = ()):
        self.clauses = tuple(clauses)

    def __iter__(self) -> Iterator[PropertyClause]:
        return iter(self.clauses)

    def __len__(self) -> int:
        return len(self.clauses)

    def matches(self, snapshot: PropertySnapshot) -> bool:
        return all(clause.matches(snapshot) for clause in self.clauses)

    def condition(self) -> ColumnElement:
        if not self.clauses:
            return true()
        return and_(*(clause.condition() for clause in self.clauses))

    def __repr__(self) -> str:
        return f"PropertyPredicate({list(self.clauses)!r})"


def build_predicate(filters) -> PropertyPredicate:
    """
    Translate a ``PropertyFilter`` into a predicate.

    Only the criteria that are set contribute a clause. Price bounds are
    inclusive, bedroom and bathroom criteria are minimums and the listing type
    is an exact, case-sensitive match applied only when non-empty.

    Args:
        filters: PropertyFilter with the search criteria

    Returns:
        PropertyPredicate combining every requested criterion
    """
    clauses = []

    if filters.min_price is not None:
        clauses.append(ComparisonClause("price", "ge", filters.min_price))
    if filters.max_price is not None:
        clauses.append(ComparisonClause("price", "le", filters.max_price))
    if filters.location_id is not None:
        clauses.append(ComparisonClause("location_id", "eq", filters.location_id))
    if filters.property_type_id is not None:
        clauses.append(ComparisonClause("property_type_id", "eq", filters.property_type_id))
    if filters.bedrooms is not None:
        clauses.append(ComparisonClause("bedrooms", "ge", filters.bedrooms))
    if filters.bathrooms is not None:
        clauses.append(ComparisonClause("bathrooms", "ge", filters.bathrooms))
    if filters.listing_type:
        clauses.append(ComparisonClause("listing_type", "eq", filters.listing_type))
    if filters.features:
        clauses.append(FeatureSupersetClause(frozenset(filters.features)))

    return PropertyPredicate(tuple(clauses))
