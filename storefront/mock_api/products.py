"""In-memory product store for the mock product API.

Generates a deterministic catalog from a seed and supports the listing,
filter, count, and single-record operations the storefront consumes.
"""

import random
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from storefront.schemas import CategorySchema, ProductDraft, ProductSchema


# ============================================================================
# Constants
# ============================================================================

CATEGORIES = [
    ("Electronics", "electronics"),
    ("Books", "books"),
    ("Clothing", "clothing"),
    ("Home", "home"),
]

ADJECTIVES = [
    "Classic",
    "Compact",
    "Deluxe",
    "Essential",
    "Premium",
    "Smart",
    "Vintage",
    "Wireless",
]

NOUNS = {
    "electronics": ["Headphones", "Speaker", "Charger", "Keyboard", "Monitor"],
    "books": ["Novel", "Cookbook", "Atlas", "Journal", "Anthology"],
    "clothing": ["Jacket", "Sweater", "Scarf", "Sneakers", "Hat"],
    "home": ["Lamp", "Mug", "Blanket", "Vase", "Clock"],
}

DEFAULT_PAGE_SIZE = 6


def slugify(value: str) -> str:
    """Lowercase, hyphen-separated URL slug."""
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


@dataclass
class StoredProduct:
    """Product row plus its creation time (listing is newest first)."""

    product: ProductSchema
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ProductStore:
    """In-memory catalog.

    Listing pages are ordered newest first. Filtering returns the full
    match set: every selected category matches (any-of) and the price
    lies within the inclusive ``[low, high]`` bounds.
    """

    def __init__(
        self,
        seed: int = 42,
        product_count: int = 20,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        """Initialize the store.

        Args:
            seed: Random seed for deterministic generation.
            product_count: Number of products to generate.
            page_size: Products per listing page.
        """
        self.page_size = page_size
        self._rng = random.Random(seed)
        self._categories: dict[str, CategorySchema] = {}
        self._products: dict[str, StoredProduct] = {}
        self._generate(product_count)

    def _generate(self, product_count: int) -> None:
        for index, (name, slug) in enumerate(CATEGORIES, start=1):
            category_id = f"cat-{index}"
            self._categories[category_id] = CategorySchema(id=category_id, name=name, slug=slug)

        base_time = datetime(2024, 1, 1, tzinfo=timezone.utc)
        categories = list(self._categories.values())
        for index in range(product_count):
            category = categories[index % len(categories)]
            name = (
                f"{self._rng.choice(ADJECTIVES)} "
                f"{self._rng.choice(NOUNS[category.slug])} {index + 1}"
            )
            product = ProductSchema(
                id=f"prod-{index + 1}",
                name=name,
                description=f"{name} from the {category.name} department.",
                price=float(self._rng.randint(5, 150)),
                category=category.id,
                shipping=self._rng.random() < 0.7,
                slug=slugify(name),
                quantity=self._rng.randint(0, 50),
            )
            self._products[product.id] = StoredProduct(
                product=product,
                created_at=base_time + timedelta(minutes=index),
            )

    # =========================================================================
    # Queries
    # =========================================================================

    def _newest_first(self) -> list[ProductSchema]:
        rows = sorted(self._products.values(), key=lambda row: row.created_at, reverse=True)
        return [row.product for row in rows]

    def list_page(self, page: int) -> list[ProductSchema]:
        """Get one listing page (1-indexed)."""
        start = (page - 1) * self.page_size
        return self._newest_first()[start:start + self.page_size]

    def count(self) -> int:
        return len(self._products)

    def filter(self, category_ids: list[str], price_bounds: list[float]) -> list[ProductSchema]:
        """Get every product matching the categories and price bounds.

        Args:
            category_ids: Any-of category filter; empty means all.
            price_bounds: ``[low, high]`` inclusive, or empty for no bound.

        Returns:
            All matching products, newest first.
        """
        matches = []
        for product in self._newest_first():
            if category_ids and product.category_id not in category_ids:
                continue
            if len(price_bounds) == 2 and not (
                price_bounds[0] <= product.price <= price_bounds[1]
            ):
                continue
            matches.append(product)
        return matches

    def categories(self) -> list[CategorySchema]:
        return list(self._categories.values())

    def get_by_slug(self, slug: str) -> ProductSchema | None:
        for row in self._products.values():
            if row.product.slug == slug:
                return self._with_category(row.product)
        return None

    def by_category_slug(self, slug: str) -> tuple[CategorySchema | None, list[ProductSchema]]:
        """Get a category by slug and all its products."""
        category = next((c for c in self._categories.values() if c.slug == slug), None)
        if category is None:
            return None, []
        return category, self.filter([category.id], [])

    def _with_category(self, product: ProductSchema) -> ProductSchema:
        category = self._categories.get(product.category_id or "")
        if category is None:
            return product
        return product.model_copy(update={"category": category})

    # =========================================================================
    # Admin Mutations
    # =========================================================================

    def create(self, draft: ProductDraft) -> ProductSchema:
        product = ProductSchema(
            id=f"prod-{uuid.uuid4().hex[:8]}",
            slug=slugify(draft.name),
            **draft.model_dump(),
        )
        self._products[product.id] = StoredProduct(product=product)
        return product

    def update(self, product_id: str, draft: ProductDraft) -> ProductSchema | None:
        row = self._products.get(product_id)
        if row is None:
            return None
        fields: dict[str, Any] = draft.model_dump()
        fields["slug"] = slugify(draft.name)
        row.product = row.product.model_copy(update=fields)
        return row.product

    def delete(self, product_id: str) -> bool:
        return self._products.pop(product_id, None) is not None


# Global instance (for simplicity in mock)
_product_store: ProductStore | None = None


def get_product_store(
    seed: int = 42,
    product_count: int = 20,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> ProductStore:
    """Get or create product store instance."""
    global _product_store
    if _product_store is None:
        _product_store = ProductStore(seed, product_count, page_size)
    return _product_store


def reset_product_store() -> None:
    """Reset product store instance (for testing)."""
    global _product_store
    _product_store = None
