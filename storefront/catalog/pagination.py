"""Pagination state for the unfiltered listing."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PaginationCursor:
    """Immutable pagination snapshot.

    Attributes:
        page: Page number (1-indexed).
        total_count: Total product count, None until the count query answered.
            Only meaningful while no facet is selected.
    """

    page: int = 1
    total_count: int | None = None

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")


class PaginationState:
    """Current listing page and the last known total count.

    The page only moves forward through ``advance()``; ``reset()`` is the
    only way back to page 1.
    """

    def __init__(self) -> None:
        self._page = 1
        self._total_count: int | None = None

    @property
    def page(self) -> int:
        return self._page

    @property
    def total_count(self) -> int | None:
        return self._total_count

    @property
    def cursor(self) -> PaginationCursor:
        """Get an immutable snapshot."""
        return PaginationCursor(page=self._page, total_count=self._total_count)

    def advance(self) -> int:
        """Move to the next page.

        Returns:
            The new page number.
        """
        self._page += 1
        return self._page

    def reset(self) -> None:
        """Go back to page 1. The known total is kept."""
        self._page = 1

    def set_total_count(self, total: int) -> None:
        """Record the authoritative total product count.

        Args:
            total: Total number of products in the unfiltered catalog.
        """
        if total < 0:
            raise ValueError(f"total must be >= 0, got {total}")
        self._total_count = total

    def has_more(self, visible_count: int) -> bool:
        """Check if more listing pages exist beyond what is visible.

        Args:
            visible_count: Number of products currently visible.

        Returns:
            True if the total is known and exceeds the visible count.
        """
        return self._total_count is not None and visible_count < self._total_count
