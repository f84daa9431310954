"""Catalog browsing.

Facet and pagination state, query construction, result merging, and the
browsing state machine. The orchestrator lives in
``storefront.catalog.orchestrator`` and is not re-exported here because
it depends on the HTTP client, which itself builds on these modules.
"""

from storefront.catalog.facets import (
    PRICE_RANGES,
    FacetSelection,
    FacetState,
    PriceRange,
    resolve_price_range,
)
from storefront.catalog.merger import MergePolicy, MergeResult, ResultMerger, TaggedQuery
from storefront.catalog.pagination import PaginationCursor, PaginationState
from storefront.catalog.query import (
    CatalogRequest,
    QueryKind,
    build_catalog_query,
    category_list_query,
    filtered_query,
    listing_page_query,
    total_count_query,
)
from storefront.catalog.state_machine import CatalogStatus, validate_catalog_transition

__all__ = [
    # Facets
    "PRICE_RANGES",
    "FacetSelection",
    "FacetState",
    "PriceRange",
    "resolve_price_range",
    # Pagination
    "PaginationCursor",
    "PaginationState",
    # Query
    "CatalogRequest",
    "QueryKind",
    "build_catalog_query",
    "category_list_query",
    "filtered_query",
    "listing_page_query",
    "total_count_query",
    # Merger
    "MergePolicy",
    "MergeResult",
    "ResultMerger",
    "TaggedQuery",
    # State machine
    "CatalogStatus",
    "validate_catalog_transition",
]
