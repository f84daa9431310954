"""Facet selection state.

Holds the shopper's category and price bucket choices. Categories are
multi-select, the price bucket is single-select from a fixed set.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog

from storefront.exceptions import UnknownPriceRangeError

logger = structlog.get_logger()


# ============================================================================
# Price Buckets
# ============================================================================


@dataclass(frozen=True)
class PriceRange:
    """A fixed price bucket.

    Attributes:
        token: Stable identifier of the bucket.
        label: Display label.
        low: Inclusive lower bound.
        high: Inclusive upper bound.
    """

    token: str
    label: str
    low: float
    high: float

    @property
    def bounds(self) -> list[float]:
        """Bounds in the backend's ``[low, high]`` form."""
        return [self.low, self.high]

    def contains(self, price: float) -> bool:
        """Check if a price falls in this bucket."""
        return self.low <= price <= self.high


PRICE_RANGES: tuple[PriceRange, ...] = (
    PriceRange(token="0-19", label="$0 to 19", low=0, high=19),
    PriceRange(token="20-39", label="$20 to 39", low=20, high=39),
    PriceRange(token="40-59", label="$40 to 59", low=40, high=59),
    PriceRange(token="60-79", label="$60 to 79", low=60, high=79),
    PriceRange(token="80-99", label="$80 to 99", low=80, high=99),
    PriceRange(token="100+", label="$100 or more", low=100, high=9999),
)

_BY_TOKEN = {price_range.token: price_range for price_range in PRICE_RANGES}


def resolve_price_range(value: Any) -> PriceRange | None:
    """Resolve a price token to one of the fixed buckets.

    Accepts a PriceRange, a bucket token, or a ``[low, high]`` pair.
    ``None`` and empty values mean "no price bucket".

    Args:
        value: Value to resolve.

    Returns:
        The matching bucket, or None.

    Raises:
        UnknownPriceRangeError: If the value matches no bucket.
    """
    if value is None or value == "" or value == [] or value == ():
        return None
    if isinstance(value, PriceRange):
        if _BY_TOKEN.get(value.token) != value:
            raise UnknownPriceRangeError(value)
        return value
    if isinstance(value, str):
        try:
            return _BY_TOKEN[value]
        except KeyError:
            raise UnknownPriceRangeError(value) from None
    if isinstance(value, Sequence) and len(value) == 2:
        try:
            bounds = [float(v) for v in value]
        except (TypeError, ValueError):
            raise UnknownPriceRangeError(value) from None
        for price_range in PRICE_RANGES:
            if bounds == price_range.bounds:
                return price_range
    raise UnknownPriceRangeError(value)


# ============================================================================
# Facet Selection
# ============================================================================


@dataclass(frozen=True)
class FacetSelection:
    """Immutable snapshot of the selected facets.

    Attributes:
        category_ids: Selected category IDs (unordered, no duplicates).
        price_range: Selected price bucket, if any.
    """

    category_ids: frozenset[str] = field(default_factory=frozenset)
    price_range: PriceRange | None = None

    @property
    def is_empty(self) -> bool:
        """True when neither categories nor a price bucket are selected."""
        return not self.category_ids and self.price_range is None


class FacetState:
    """Mutable holder for the shopper's facet selection.

    Every mutator returns True if the selection actually changed, so the
    orchestrator can skip redundant queries.
    """

    def __init__(
        self,
        category_ids: Iterable[str] = (),
        price_range: PriceRange | None = None,
    ) -> None:
        self._category_ids: set[str] = set(category_ids)
        self._price_range = price_range

    @property
    def selection(self) -> FacetSelection:
        """Get an immutable snapshot of the current selection."""
        return FacetSelection(
            category_ids=frozenset(self._category_ids),
            price_range=self._price_range,
        )

    @property
    def is_empty(self) -> bool:
        return not self._category_ids and self._price_range is None

    def toggle_category(self, category_id: str, selected: bool) -> bool:
        """Add or remove a category from the selection.

        Unknown category IDs are accepted as-is; the catalog API decides
        what they match.

        Args:
            category_id: Category to toggle.
            selected: True to add, False to remove.

        Returns:
            True if the selection changed.
        """
        if selected:
            if category_id in self._category_ids:
                return False
            self._category_ids.add(category_id)
        else:
            if category_id not in self._category_ids:
                return False
            self._category_ids.discard(category_id)

        logger.debug(
            "Category toggled",
            category_id=category_id,
            selected=selected,
            selected_count=len(self._category_ids),
        )
        return True

    def set_price_range(self, token: Any) -> bool:
        """Replace the selected price bucket.

        Args:
            token: PriceRange, bucket token, ``[low, high]`` pair, or None.

        Returns:
            True if the selection changed.

        Raises:
            UnknownPriceRangeError: If the token matches no bucket.
        """
        price_range = resolve_price_range(token)
        if price_range == self._price_range:
            return False
        self._price_range = price_range
        logger.debug(
            "Price range set",
            token=price_range.token if price_range else None,
        )
        return True

    def reset(self) -> bool:
        """Clear all facets.

        Returns:
            True if anything was selected before.
        """
        changed = not self.is_empty
        self._category_ids.clear()
        self._price_range = None
        return changed
