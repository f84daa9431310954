"""Result merging.

Combines a query response with the currently visible list. The merge
policy is fixed when the query is issued, not inferred from the response.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

import structlog

from storefront.catalog.query import CatalogRequest, QueryKind
from storefront.exceptions import StaleResponseError
from storefront.schemas import ProductSchema

logger = structlog.get_logger()


class MergePolicy(str, Enum):
    """How a response combines with the visible list."""

    REPLACE = "replace"
    APPEND = "append"


@dataclass(frozen=True)
class TaggedQuery:
    """A request tagged at issue time.

    Attributes:
        tag: Monotonic issue counter.
        request: Request descriptor.
        policy: Merge policy to apply to its response.
    """

    tag: int
    request: CatalogRequest
    policy: MergePolicy


@dataclass(frozen=True)
class MergeResult:
    """Outcome of a merge.

    Attributes:
        products: New visible list.
        total_estimate: Item count known from the response itself. Set for
            filtered queries (complete result sets), None otherwise.
    """

    products: tuple[ProductSchema, ...]
    total_estimate: int | None = None


class ResultMerger:
    """Applies tagged responses to the visible list."""

    def merge(
        self,
        previous: Sequence[ProductSchema],
        query: TaggedQuery,
        products: Sequence[ProductSchema],
        latest_tag: int,
    ) -> MergeResult:
        """Merge a response into the visible list.

        Args:
            previous: Currently visible products.
            query: The tagged query the response belongs to.
            products: Products carried by the response.
            latest_tag: Tag of the most recently issued query.

        Returns:
            The merge result.

        Raises:
            StaleResponseError: If the query was superseded.
        """
        if query.tag != latest_tag:
            raise StaleResponseError(tag=query.tag, latest_tag=latest_tag)

        if query.policy is MergePolicy.APPEND:
            merged = (*previous, *products)
            logger.debug(
                "Appended page",
                tag=query.tag,
                page=query.request.page,
                added=len(products),
                visible=len(merged),
            )
            return MergeResult(products=merged)

        replaced = tuple(products)
        total_estimate = len(replaced) if query.request.kind is QueryKind.FILTERED else None
        logger.debug(
            "Replaced visible list",
            tag=query.tag,
            kind=query.request.kind.value,
            visible=len(replaced),
        )
        return MergeResult(products=replaced, total_estimate=total_estimate)
