"""Catalog query construction.

Pure functions mapping the facet selection and pagination cursor to the
exact request to issue. Filtering and paging are mutually exclusive: a
filtered query returns its full match set and never carries a page.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from storefront.catalog.facets import FacetSelection
from storefront.catalog.pagination import PaginationCursor
from storefront.schemas import ProductFilterRequest

PRODUCT_LIST_PATH = "/api/v1/product/product-list/{page}"
PRODUCT_COUNT_PATH = "/api/v1/product/product-count"
PRODUCT_FILTERS_PATH = "/api/v1/product/product-filters"
CATEGORY_LIST_PATH = "/api/v1/category/get-category"


class QueryKind(str, Enum):
    """What a catalog request asks for."""

    LISTING = "listing"
    FILTERED = "filtered"
    TOTAL_COUNT = "total_count"
    CATEGORIES = "categories"


@dataclass(frozen=True)
class CatalogRequest:
    """Descriptor of one HTTP request against the product API.

    Attributes:
        kind: Query kind.
        method: HTTP method.
        path: Request path relative to the API base URL.
        body: JSON body for POST requests.
        page: Listing page, None for non-listing queries.
    """

    kind: QueryKind
    method: str
    path: str
    body: dict[str, Any] | None = None
    page: int | None = None


def listing_page_query(page: int) -> CatalogRequest:
    """Build the unfiltered listing request for one page.

    Args:
        page: Page number (1-indexed).

    Returns:
        Listing request.
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    return CatalogRequest(
        kind=QueryKind.LISTING,
        method="GET",
        path=PRODUCT_LIST_PATH.format(page=page),
        page=page,
    )


def filtered_query(selection: FacetSelection) -> CatalogRequest:
    """Build the facet-filtered request.

    Category IDs are sorted so identical selections map to identical bodies.

    Args:
        selection: Non-empty facet selection.

    Returns:
        Filtered request without any page parameter.
    """
    body = ProductFilterRequest(
        checked=sorted(selection.category_ids),
        radio=selection.price_range.bounds if selection.price_range else [],
    )
    return CatalogRequest(
        kind=QueryKind.FILTERED,
        method="POST",
        path=PRODUCT_FILTERS_PATH,
        body=body.model_dump(),
    )


def build_catalog_query(
    selection: FacetSelection,
    cursor: PaginationCursor,
) -> CatalogRequest:
    """Map the current facets and cursor to the request to issue.

    Args:
        selection: Current facet selection.
        cursor: Current pagination cursor.

    Returns:
        A listing request for ``cursor.page`` when no facet is selected,
        otherwise a filtered request.
    """
    if selection.is_empty:
        return listing_page_query(cursor.page)
    return filtered_query(selection)


def total_count_query() -> CatalogRequest:
    """Build the unfiltered total count request."""
    return CatalogRequest(
        kind=QueryKind.TOTAL_COUNT,
        method="GET",
        path=PRODUCT_COUNT_PATH,
    )


def category_list_query() -> CatalogRequest:
    """Build the category facet list request."""
    return CatalogRequest(
        kind=QueryKind.CATEGORIES,
        method="GET",
        path=CATEGORY_LIST_PATH,
    )
