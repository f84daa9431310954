"""Cart store.

Append-only list of product snapshots mirrored to durable key-value
storage. The stored format is a JSON array of product payloads, exactly
as the product API returned them.
"""

import copy
import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import ValidationError

from storefront.cart.storage import KeyValueStorage
from storefront.exceptions import ParseFailure
from storefront.notifications import NotificationCenter
from storefront.schemas import ProductSchema

logger = structlog.get_logger()

DEFAULT_CART_KEY = "cart"


@dataclass(frozen=True)
class CartItem:
    """A product as it was when added to the cart.

    Attributes:
        product: Independent copy of the product.
    """

    product: ProductSchema

    @classmethod
    def snapshot(cls, product: ProductSchema | Mapping[str, Any]) -> "CartItem":
        """Copy a product so later catalog updates cannot reach the cart.

        Args:
            product: Product model or raw product payload.

        Returns:
            New cart item.
        """
        if isinstance(product, ProductSchema):
            product = product.to_payload()
        return cls(product=ProductSchema.model_validate(copy.deepcopy(dict(product))))

    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def price(self) -> float:
        return self.product.price

    def to_payload(self) -> dict[str, Any]:
        return self.product.to_payload()


def decode_cart(key: str, raw: str) -> list[CartItem]:
    """Decode a stored cart payload.

    Args:
        key: Storage key, for error context.
        raw: Stored JSON text.

    Returns:
        Decoded cart items.

    Raises:
        ParseFailure: If the payload is not a JSON array of products.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ParseFailure(key, f"invalid JSON: {e.msg}") from e

    if not isinstance(data, list):
        raise ParseFailure(key, f"expected a list, got {type(data).__name__}")

    try:
        return [CartItem(product=ProductSchema.model_validate(entry)) for entry in data]
    except ValidationError as e:
        raise ParseFailure(key, f"{e.error_count()} invalid product field(s)") from e


def encode_cart(items: list[CartItem]) -> str:
    """Serialize cart items to the stored JSON format."""
    return json.dumps([item.to_payload() for item in items])


class CartStore:
    """In-memory cart mirrored to durable storage on every mutation.

    Duplicates are allowed: adding the same product twice yields two
    independent snapshots.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = DEFAULT_CART_KEY,
        notifications: NotificationCenter | None = None,
    ) -> None:
        """Initialize the cart store.

        Args:
            storage: Durable key-value storage.
            key: Storage key holding the serialized cart.
            notifications: Where add confirmations are reported.
        """
        self.storage = storage
        self.key = key
        self.notifications = notifications or NotificationCenter()
        self._items: list[CartItem] = []
        self._hydrated = False

    @property
    def items(self) -> tuple[CartItem, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[CartItem]:
        return iter(tuple(self._items))

    def total(self) -> float:
        """Sum of item prices."""
        return sum(item.price for item in self._items)

    def hydrate(self) -> bool:
        """Load the cart from durable storage.

        Runs once; later calls are no-ops. A missing key means an empty
        cart. A malformed payload is logged and also yields an empty cart.

        Returns:
            True if a stored cart was loaded.
        """
        if self._hydrated:
            return False
        self._hydrated = True

        raw = self.storage.get(self.key)
        if raw is None:
            logger.debug("No stored cart", key=self.key)
            return False

        try:
            self._items = decode_cart(self.key, raw)
        except ParseFailure as e:
            logger.warning("Discarding unreadable cart", key=self.key, reason=e.message)
            self._items = []
            return False

        logger.info("Cart hydrated", key=self.key, item_count=len(self._items))
        return True

    def add(self, product: ProductSchema | Mapping[str, Any]) -> CartItem:
        """Append a product snapshot and persist the cart.

        The in-memory append and the storage write happen in the same
        step; if the write fails the append is rolled back and the error
        propagates.

        Args:
            product: Product to add.

        Returns:
            The new cart item.
        """
        item = CartItem.snapshot(product)
        self._items.append(item)
        try:
            self.storage.set(self.key, encode_cart(self._items))
        except Exception:
            self._items.pop()
            logger.exception("Failed to persist cart", key=self.key)
            raise

        logger.info(
            "Item added to cart",
            product_id=item.product_id,
            item_count=len(self._items),
        )
        self.notifications.success("Item added to cart")
        return item
