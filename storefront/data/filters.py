"""
Product filter state and the predicates it turns into.

``FilterSpec`` is an immutable value; every change goes through
``update_filters`` which returns a new, validated FilterSpec. ``compose_predicates``
turns a FilterSpec into a backend-neutral list of ``Predicate`` values that the
catalog stores render as PostgREST parameters or SQLAlchemy expressions.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple


def _frozen(values: Optional[Iterable[Any]]) -> FrozenSet[Any]:
    if values is None:
        return frozenset()
    if isinstance(values, str):
        return frozenset([values])
    return frozenset(values)


@dataclass(frozen=True)
class FilterSpec:
    """Optional product-query constraints. Empty or absent means unconstrained."""

    brands: FrozenSet[str] = field(default_factory=frozenset)
    colors: FrozenSet[str] = field(default_factory=frozenset)
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    discount_only: bool = False
    discount_percentage: Optional[int] = None
    rating: Optional[float] = None
    screen_sizes: FrozenSet[float] = field(default_factory=frozenset)
    search: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "brands", _frozen(self.brands))
        object.__setattr__(self, "colors", _frozen(self.colors))
        object.__setattr__(self, "screen_sizes", frozenset(float(s) for s in _frozen(self.screen_sizes)))
        object.__setattr__(self, "search", self.search or "")
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise ValueError(f"min_price {self.min_price} is greater than max_price {self.max_price}")

    @property
    def has_price_range(self) -> bool:
        # A single bound applies no price constraint at all.
        return self.min_price is not None and self.max_price is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "brands": sorted(self.brands),
            "colors": sorted(self.colors),
            "min_price": self.min_price,
            "max_price": self.max_price,
            "discount_only": self.discount_only,
            "discount_percentage": self.discount_percentage,
            "rating": self.rating,
            "screen_sizes": sorted(self.screen_sizes),
            "search": self.search,
        }


def update_filters(filters: FilterSpec, **changes: Any) -> FilterSpec:
    """Return a new FilterSpec with ``changes`` applied; ``filters`` is untouched."""
    return replace(filters, **changes)


def parse_price_range(value: str, ceiling: float) -> Tuple[float, float]:
    """
    Parse a price range like "200000-5000000".

    A blank lower bound becomes 0 and a blank upper bound becomes ``ceiling``,
    so the result always carries both bounds.
    """
    value = (value or "").strip()
    if "-" not in value:
        raise ValueError(f"price range must look like MIN-MAX, got {value!r}")
    lower, upper = value.split("-", 1)
    lower_val = float(lower) if lower.strip() else 0.0
    upper_val = float(upper) if upper.strip() else float(ceiling)
    return (lower_val, upper_val)


@dataclass(frozen=True)
class Predicate:
    """One refinement of the product query: ``column <op> value``."""

    column: str
    op: str  # "in" | "gt" | "gte" | "lte" | "ilike"
    value: Any

    @property
    def is_unsatisfiable(self) -> bool:
        return self.op == "in" and len(self.value) == 0

    def matches(self, row: Dict[str, Any]) -> bool:
        """Evaluate against a plain row dict."""
        actual = row.get(self.column)
        if self.op == "in":
            return actual in self.value
        if self.op == "ilike":
            return actual is not None and self.value.lower() in str(actual).lower()
        if actual is None:
            return False
        if self.op == "gt":
            return actual > self.value
        if self.op == "gte":
            return actual >= self.value
        if self.op == "lte":
            return actual <= self.value
        raise ValueError(f"unknown predicate op {self.op!r}")


def compose_predicates(filters: FilterSpec, brand_ids: Sequence[str] = ()) -> List[Predicate]:
    """
    Build the conjunctive predicate list for ``filters``.

    ``brand_ids`` are the ids already resolved from ``filters.brands``; an empty
    resolution with brands requested yields an unsatisfiable predicate.
    """
    predicates: List[Predicate] = []

    if filters.brands:
        predicates.append(Predicate("brand_id", "in", tuple(sorted(brand_ids))))

    if filters.colors:
        predicates.append(Predicate("color", "in", tuple(sorted(filters.colors))))

    if filters.has_price_range:
        predicates.append(Predicate("price", "gte", filters.min_price))
        predicates.append(Predicate("price", "lte", filters.max_price))

    if filters.discount_only:
        predicates.append(Predicate("discount_percentage", "gt", 0))

    # Independent of discount_only; both apply when both are set.
    if filters.discount_percentage:
        predicates.append(Predicate("discount_percentage", "gte", filters.discount_percentage))

    if filters.rating:
        predicates.append(Predicate("rating", "gte", filters.rating))

    if filters.screen_sizes:
        predicates.append(Predicate("screen_size", "in", tuple(sorted(filters.screen_sizes))))

    if filters.search:
        predicates.append(Predicate("name", "ilike", filters.search))

    return predicates
