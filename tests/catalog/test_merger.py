"""Tests for result merging and the catalog state machine."""

import pytest

from storefront.catalog.facets import FacetSelection
from storefront.catalog.merger import MergePolicy, ResultMerger, TaggedQuery
from storefront.catalog.query import filtered_query, listing_page_query
from storefront.catalog.state_machine import CatalogStatus, validate_catalog_transition
from storefront.exceptions import InvalidStateTransitionError, StaleResponseError
from tests.conftest import make_product


@pytest.fixture
def merger() -> ResultMerger:
    return ResultMerger()


class TestResultMerger:
    """Tests for ResultMerger policies."""

    def test_replace_discards_previous(self, merger) -> None:
        """REPLACE makes the response the whole list."""
        previous = [make_product(1), make_product(2)]
        response = [make_product(3)]
        query = TaggedQuery(tag=1, request=listing_page_query(1), policy=MergePolicy.REPLACE)

        result = merger.merge(previous, query, response, latest_tag=1)

        assert [p.id for p in result.products] == ["prod-3"]
        assert result.total_estimate is None

    def test_append_concatenates_in_order(self, merger) -> None:
        """APPEND keeps previous items and adds the response after them."""
        previous = [make_product(1), make_product(2)]
        response = [make_product(3), make_product(4)]
        query = TaggedQuery(tag=5, request=listing_page_query(2), policy=MergePolicy.APPEND)

        result = merger.merge(previous, query, response, latest_tag=5)

        assert [p.id for p in result.products] == ["prod-1", "prod-2", "prod-3", "prod-4"]

    def test_append_does_not_deduplicate(self, merger) -> None:
        """Items already visible are appended again."""
        previous = [make_product(1)]
        query = TaggedQuery(tag=1, request=listing_page_query(2), policy=MergePolicy.APPEND)

        result = merger.merge(previous, query, [make_product(1)], latest_tag=1)

        assert [p.id for p in result.products] == ["prod-1", "prod-1"]

    def test_filtered_replace_reports_count(self, merger) -> None:
        """A filtered result set is complete, so its size is the count."""
        selection = FacetSelection(category_ids=frozenset({"cat-1"}))
        query = TaggedQuery(tag=2, request=filtered_query(selection), policy=MergePolicy.REPLACE)

        result = merger.merge([], query, [make_product(1), make_product(2)], latest_tag=2)

        assert result.total_estimate == 2

    def test_stale_query_rejected(self, merger) -> None:
        """A response for a superseded query is refused."""
        query = TaggedQuery(tag=1, request=listing_page_query(1), policy=MergePolicy.REPLACE)

        with pytest.raises(StaleResponseError) as exc_info:
            merger.merge([], query, [make_product(1)], latest_tag=2)

        assert exc_info.value.tag == 1
        assert exc_info.value.latest_tag == 2


class TestCatalogStatus:
    """Tests for the CatalogStatus transition table."""

    def test_idle_can_only_start_loading(self) -> None:
        assert CatalogStatus.IDLE.allowed_transitions() == [CatalogStatus.LOADING]

    def test_loading_can_be_superseded(self) -> None:
        """A newer query may be issued while one is in flight."""
        assert CatalogStatus.LOADING.can_transition_to(CatalogStatus.LOADING)

    def test_loading_settles_to_ready_or_failed(self) -> None:
        assert CatalogStatus.LOADING.can_transition_to(CatalogStatus.READY)
        assert CatalogStatus.LOADING.can_transition_to(CatalogStatus.FAILED)

    def test_ready_cannot_fail_without_loading(self) -> None:
        assert not CatalogStatus.READY.can_transition_to(CatalogStatus.FAILED)

    def test_settled_states(self) -> None:
        assert CatalogStatus.READY.is_settled()
        assert CatalogStatus.FAILED.is_settled()
        assert not CatalogStatus.LOADING.is_settled()

    def test_validate_raises_on_invalid_transition(self) -> None:
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            validate_catalog_transition(CatalogStatus.IDLE, CatalogStatus.READY)

        assert exc_info.value.details["current_state"] == "idle"
        assert exc_info.value.details["allowed_transitions"] == ["loading"]
