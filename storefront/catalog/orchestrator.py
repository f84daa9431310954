"""Catalog browsing orchestrator.

Ties facet and pagination state to the product API. Every user action
issues a tagged query; only the response to the most recently issued
query is committed to the visible list. Earlier responses still in
flight are dropped when they arrive, no cancellation involved.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

import structlog
from pydantic import ValidationError

from storefront.api_client import APIResponse, api_error_to_exception
from storefront.catalog.facets import FacetSelection, FacetState
from storefront.catalog.merger import MergePolicy, MergeResult, ResultMerger, TaggedQuery
from storefront.catalog.pagination import PaginationState
from storefront.catalog.query import (
    CatalogRequest,
    QueryKind,
    build_catalog_query,
    category_list_query,
    listing_page_query,
    total_count_query,
)
from storefront.catalog.state_machine import CatalogStatus, validate_catalog_transition
from storefront.exceptions import ServerRejection, StaleResponseError, StorefrontError
from storefront.notifications import NotificationCenter
from storefront.schemas import (
    CategoryListResponse,
    CategorySchema,
    ProductCountResponse,
    ProductListResponse,
    ProductSchema,
)

logger = structlog.get_logger()


class CatalogGateway(Protocol):
    """Anything that can execute a catalog request."""

    async def execute(self, request: CatalogRequest) -> APIResponse: ...


@dataclass(frozen=True)
class CatalogView:
    """Immutable snapshot published to the rendering layer.

    Attributes:
        products: Visible product list.
        status: Current catalog status.
        error_reason: Failure reason while FAILED, else None.
        can_load_more: Whether the "load more" control should be offered.
        page: Current listing page.
        total_count: Known total for the current mode (unfiltered total,
            or size of the filtered result set).
        selection: Current facet selection.
        categories: Selectable categories.
    """

    products: tuple[ProductSchema, ...] = ()
    status: CatalogStatus = CatalogStatus.IDLE
    error_reason: str | None = None
    can_load_more: bool = False
    page: int = 1
    total_count: int | None = None
    selection: FacetSelection = field(default_factory=FacetSelection)
    categories: tuple[CategorySchema, ...] = ()

    @property
    def loading(self) -> bool:
        return self.status is CatalogStatus.LOADING


ViewListener = Callable[[CatalogView], None]


class CatalogOrchestrator:
    """State machine for browsing the catalog.

    Owns the FacetState and PaginationState holders; all mutations go
    through the action methods below so each one triggers exactly one
    query-and-commit cycle.

    Example usage:
        orchestrator = CatalogOrchestrator(api_client)
        await orchestrator.start()
        await orchestrator.toggle_category("cat-1", True)
        await orchestrator.reset_filters()
        if orchestrator.can_load_more:
            await orchestrator.load_more()
    """

    def __init__(
        self,
        gateway: CatalogGateway,
        notifications: NotificationCenter | None = None,
        merger: ResultMerger | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            gateway: Executes catalog requests (usually StorefrontAPIClient).
            notifications: Where failures are reported.
            merger: Result merger.
        """
        self.gateway = gateway
        self.notifications = notifications or NotificationCenter()
        self.merger = merger or ResultMerger()

        self.facets = FacetState()
        self.pagination = PaginationState()

        self._status = CatalogStatus.IDLE
        self._error_reason: str | None = None
        self._visible: tuple[ProductSchema, ...] = ()
        self._result_count: int | None = None
        self._categories: tuple[CategorySchema, ...] = ()
        self._showing_listing = False

        self._latest_tag = 0
        self._latest_count_tag = 0
        self._listeners: list[ViewListener] = []

    # =========================================================================
    # Rendering Surface
    # =========================================================================

    @property
    def status(self) -> CatalogStatus:
        return self._status

    @property
    def visible_list(self) -> tuple[ProductSchema, ...]:
        return self._visible

    @property
    def loading(self) -> bool:
        return self._status is CatalogStatus.LOADING

    @property
    def error_reason(self) -> str | None:
        return self._error_reason if self._status is CatalogStatus.FAILED else None

    @property
    def categories(self) -> tuple[CategorySchema, ...]:
        return self._categories

    @property
    def latest_tag(self) -> int:
        return self._latest_tag

    @property
    def can_load_more(self) -> bool:
        """Offer "load more" only while the unfiltered listing is shown with items left.

        The visible list must come from a committed listing query. It does
        not after a failed first load or a failed return from a filtered view.
        """
        return (
            self.facets.is_empty
            and self._showing_listing
            and self.pagination.has_more(len(self._visible))
        )

    def view(self) -> CatalogView:
        """Get an immutable snapshot of everything the renderer needs."""
        if self.facets.is_empty:
            total_count = self.pagination.total_count
        else:
            total_count = self._result_count
        return CatalogView(
            products=self._visible,
            status=self._status,
            error_reason=self.error_reason,
            can_load_more=self.can_load_more,
            page=self.pagination.page,
            total_count=total_count,
            selection=self.facets.selection,
            categories=self._categories,
        )

    def subscribe(self, listener: ViewListener) -> Callable[[], None]:
        """Register a listener called with a new view after every change.

        Args:
            listener: View callback.

        Returns:
            Callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # =========================================================================
    # Actions
    # =========================================================================

    async def start(self) -> None:
        """Initial load: first listing page, total count, and categories."""
        logger.info("Starting catalog")
        query = self._issue(listing_page_query(1), MergePolicy.REPLACE)
        await asyncio.gather(
            self._run(query),
            self._refresh_total(),
            self.refresh_categories(),
        )

    async def toggle_category(self, category_id: str, selected: bool) -> bool:
        """Select or deselect a category and reload.

        Args:
            category_id: Category to toggle.
            selected: True to select, False to deselect.

        Returns:
            True if the selection changed and a query was issued.
        """
        if not self.facets.toggle_category(category_id, selected):
            return False
        await self._requery_after_facet_change()
        return True

    async def set_price_range(self, token: Any) -> bool:
        """Select a price bucket (or None to clear it) and reload.

        Args:
            token: PriceRange, bucket token, ``[low, high]`` pair, or None.

        Returns:
            True if the selection changed and a query was issued.

        Raises:
            UnknownPriceRangeError: If the token matches no bucket.
        """
        if not self.facets.set_price_range(token):
            return False
        await self._requery_after_facet_change()
        return True

    async def load_more(self) -> bool:
        """Append the next listing page to the visible list.

        Only available for the unfiltered listing, while nothing is loading
        and the total count says more products exist. The page counter
        advances when the appended page is committed, so a failed attempt
        retries the same page.

        Returns:
            True if a query was issued.
        """
        if self.loading or not self.can_load_more:
            logger.debug(
                "Load more ignored",
                loading=self.loading,
                can_load_more=self.can_load_more,
            )
            return False

        next_page = self.pagination.page + 1
        query = self._issue(listing_page_query(next_page), MergePolicy.APPEND)
        await self._run(query)
        return True

    async def reset_filters(self) -> None:
        """Clear all facets and reload the first listing page."""
        self.facets.reset()
        self.pagination.reset()
        logger.info("Filters reset")
        query = self._issue(listing_page_query(1), MergePolicy.REPLACE)
        await asyncio.gather(self._run(query), self._refresh_total())

    async def refresh_categories(self) -> tuple[CategorySchema, ...]:
        """Reload the category facet list.

        Returns:
            The current categories (unchanged on failure).
        """
        try:
            data = await self._fetch(category_list_query())
            self._categories = tuple(CategoryListResponse.model_validate(data).category)
        except ValidationError as e:
            self._report_side_failure("categories", self._invalid_response(e))
        except StorefrontError as e:
            self._report_side_failure("categories", e)
        else:
            self._publish()
        return self._categories

    # =========================================================================
    # Query Cycle
    # =========================================================================

    async def _requery_after_facet_change(self) -> None:
        self.pagination.reset()
        selection = self.facets.selection
        query = self._issue(
            build_catalog_query(selection, self.pagination.cursor),
            MergePolicy.REPLACE,
        )
        if selection.is_empty:
            await asyncio.gather(self._run(query), self._refresh_total())
        else:
            await self._run(query)

    def _issue(self, request: CatalogRequest, policy: MergePolicy) -> TaggedQuery:
        self._latest_tag += 1
        query = TaggedQuery(tag=self._latest_tag, request=request, policy=policy)
        self._transition(CatalogStatus.LOADING)
        logger.info(
            "Issuing catalog query",
            tag=query.tag,
            kind=request.kind.value,
            page=request.page,
            policy=policy.value,
        )
        self._publish()
        return query

    async def _run(self, query: TaggedQuery) -> None:
        try:
            data = await self._fetch(query.request)
            products = ProductListResponse.model_validate(data).products
        except ValidationError as e:
            self._fail(query, self._invalid_response(e))
            return
        except StorefrontError as e:
            self._fail(query, e)
            return
        self._commit(query, products)

    def _commit(self, query: TaggedQuery, products: list[ProductSchema]) -> None:
        try:
            result: MergeResult = self.merger.merge(
                self._visible, query, products, self._latest_tag
            )
        except StaleResponseError as e:
            logger.debug("Dropping stale response", tag=e.tag, latest_tag=e.latest_tag)
            return

        self._visible = result.products
        self._result_count = result.total_estimate
        self._showing_listing = query.request.kind is QueryKind.LISTING
        if query.policy is MergePolicy.APPEND:
            self.pagination.advance()

        self._transition(CatalogStatus.READY)
        logger.info(
            "Committed catalog query",
            tag=query.tag,
            visible=len(self._visible),
            page=self.pagination.page,
        )
        self._publish()

    def _fail(self, query: TaggedQuery, error: StorefrontError) -> None:
        if query.tag != self._latest_tag:
            logger.debug("Dropping stale failure", tag=query.tag, latest_tag=self._latest_tag)
            return

        self._error_reason = error.message
        self._transition(CatalogStatus.FAILED)
        logger.warning(
            "Catalog query failed",
            tag=query.tag,
            kind=query.request.kind.value,
            error=error.message,
            error_type=type(error).__name__,
        )
        self.notifications.error(f"Could not load products: {error.message}")
        self._publish()

    async def _refresh_total(self) -> None:
        self._latest_count_tag += 1
        tag = self._latest_count_tag
        error: StorefrontError | None = None
        try:
            data = await self._fetch(total_count_query())
            total = ProductCountResponse.model_validate(data).total
        except ValidationError as e:
            error = self._invalid_response(e)
        except StorefrontError as e:
            error = e

        if tag != self._latest_count_tag:
            logger.debug("Dropping stale total count", tag=tag, latest_tag=self._latest_count_tag)
            return
        if error is not None:
            self._report_side_failure("total count", error)
            return
        self.pagination.set_total_count(total)
        self._publish()

    async def _fetch(self, request: CatalogRequest) -> Any:
        response = await self.gateway.execute(request)
        if not response.success:
            raise api_error_to_exception(response.error)
        return response.data

    # =========================================================================
    # Helpers
    # =========================================================================

    def _transition(self, target: CatalogStatus) -> None:
        validate_catalog_transition(self._status, target)
        self._status = target

    def _report_side_failure(self, what: str, error: StorefrontError) -> None:
        logger.warning(f"Failed to load {what}", error=error.message)
        self.notifications.error(f"Could not load {what}: {error.message}")

    @staticmethod
    def _invalid_response(error: ValidationError) -> ServerRejection:
        return ServerRejection(
            f"Malformed response: {error.error_count()} validation error(s)",
            status_code=200,
            error_code="INVALID_RESPONSE",
        )

    def _publish(self) -> None:
        if not self._listeners:
            return
        view = self.view()
        for listener in list(self._listeners):
            listener(view)
