"""Storefront composition root.

Wires settings, the HTTP client, the catalog orchestrator, the cart, and
the admin surface into one object the rendering layer holds on to.
"""

from typing import Any

import httpx
import structlog

from storefront.admin import AdminGate, AdminProductService
from storefront.api_client import StorefrontAPIClient
from storefront.cart.storage import InMemoryStorage, JsonFileStorage, KeyValueStorage
from storefront.cart.store import CartItem, CartStore
from storefront.catalog.orchestrator import CatalogOrchestrator
from storefront.config import Settings, configure_logging
from storefront.notifications import NotificationCenter
from storefront.schemas import ProductSchema

logger = structlog.get_logger()


class Storefront:
    """Everything the shopper and operator surfaces need.

    Action callbacks for the renderer are exposed directly:
    ``toggle_category``, ``set_price_range``, ``reset_filters``,
    ``load_more``, and ``add_to_cart``.

    Example usage:
        async with Storefront.from_settings(settings) as storefront:
            await storefront.start()
            await storefront.toggle_category("cat-1", True)
            storefront.add_to_cart(storefront.catalog.visible_list[0])
    """

    def __init__(
        self,
        client: StorefrontAPIClient,
        storage: KeyValueStorage,
        cart_key: str = "cart",
        notifications: NotificationCenter | None = None,
    ) -> None:
        """Initialize the storefront.

        Args:
            client: Storefront API client.
            storage: Durable storage for the cart.
            cart_key: Storage key for the cart.
            notifications: Shared notification center.
        """
        self.client = client
        self.notifications = notifications or NotificationCenter()
        self.catalog = CatalogOrchestrator(client, notifications=self.notifications)
        self.cart = CartStore(storage, key=cart_key, notifications=self.notifications)
        self.admin_gate = AdminGate(client)
        self.admin_products = AdminProductService(client, notifications=self.notifications)

        # Rendering-layer callbacks
        self.toggle_category = self.catalog.toggle_category
        self.set_price_range = self.catalog.set_price_range
        self.reset_filters = self.catalog.reset_filters
        self.load_more = self.catalog.load_more

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "Storefront":
        """Build a storefront from settings.

        Args:
            settings: Storefront settings.
            transport: Optional httpx transport override.

        Returns:
            Configured storefront (not started).
        """
        client = StorefrontAPIClient(
            base_url=settings.api_base_url,
            timeout=settings.request_timeout,
            transport=transport,
        )
        storage: KeyValueStorage
        if settings.cart_storage_path:
            storage = JsonFileStorage(settings.cart_storage_path)
        else:
            storage = InMemoryStorage()
        return cls(client, storage, cart_key=settings.cart_storage_key)

    async def start(self) -> None:
        """Hydrate the cart, then run the initial catalog load."""
        self.cart.hydrate()
        await self.catalog.start()

    def add_to_cart(self, product: ProductSchema) -> CartItem:
        """Add a product snapshot to the cart."""
        return self.cart.add(product)

    async def close(self) -> None:
        await self.client.close()

    async def __aenter__(self) -> "Storefront":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


def create_storefront(settings: Settings | None = None) -> Storefront:
    """Configure logging and build a storefront from settings."""
    if settings is None:
        from storefront.config import settings as default_settings

        settings = default_settings
    configure_logging(settings.log_level, settings.log_json)
    logger.info("Creating storefront", api_base_url=settings.api_base_url)
    return Storefront.from_settings(settings)
