"""Admin surface.

Authentication gate, the admin profile, and single-record product CRUD
for operators, plus the single-fetch pages (product detail, products of
one category). None of these take part in the catalog browsing state
machine: each issues one request and returns its result or raises.
"""

from typing import Any, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from storefront.api_client import APIResponse, StorefrontAPIClient, api_error_to_exception
from storefront.exceptions import ServerRejection, StorefrontError
from storefront.notifications import NotificationCenter
from storefront.schemas import (
    AdminAuthResponse,
    AdminProfileResponse,
    CategoryProductsResponse,
    ProductDetailResponse,
    ProductDraft,
    ProductSchema,
)

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)


def _unwrap(response: APIResponse) -> Any:
    if not response.success:
        raise api_error_to_exception(response.error)
    return response.data


def _parse(model: type[ModelT], data: Any) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ServerRejection(
            f"Malformed response: {e.error_count()} validation error(s)",
            status_code=200,
            error_code="INVALID_RESPONSE",
        ) from e


class AdminGate:
    """Decides whether a bearer token grants access to the admin surface."""

    def __init__(self, client: StorefrontAPIClient) -> None:
        self.client = client

    async def check(self, token: str | None) -> bool:
        """Check a token against the backend.

        Any failure (no token, transport error, rejection, malformed body)
        denies access.

        Args:
            token: Bearer token, or None when signed out.

        Returns:
            True if the backend confirms admin access.
        """
        if not token:
            return False

        response = await self.client.check_admin_auth(token)
        if not response.success:
            logger.info(
                "Admin access denied",
                error_code=response.error.error_code if response.error else None,
            )
            return False

        try:
            allowed = AdminAuthResponse.model_validate(response.data).ok
        except ValidationError:
            logger.warning("Admin gate returned a malformed body")
            return False

        logger.info("Admin access checked", allowed=allowed)
        return allowed


class AdminProductService:
    """Create, read, update, and delete one product at a time."""

    def __init__(
        self,
        client: StorefrontAPIClient,
        notifications: NotificationCenter | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            client: Storefront API client.
            notifications: Where results are reported.
        """
        self.client = client
        self.notifications = notifications or NotificationCenter()

    async def get(self, slug: str) -> ProductSchema:
        """Load a product for editing.

        Args:
            slug: Product slug.

        Returns:
            The product.

        Raises:
            NetworkFailure: If the request got no response.
            ServerRejection: If the backend refused it.
        """
        return await fetch_product_detail(self.client, slug)

    async def create(self, draft: ProductDraft, token: str) -> dict[str, Any]:
        """Create a product.

        Args:
            draft: Validated product fields.
            token: Admin bearer token.

        Returns:
            The backend's response body.
        """
        try:
            data = _unwrap(await self.client.create_product(draft, token))
        except StorefrontError as e:
            self.notifications.error(f"Failed to create product: {e}")
            raise
        logger.info("Product created", name=draft.name)
        self.notifications.success("Product created successfully")
        return data

    async def update(self, product_id: str, draft: ProductDraft, token: str) -> dict[str, Any]:
        """Update a product.

        Args:
            product_id: Product identifier.
            draft: Validated product fields.
            token: Admin bearer token.

        Returns:
            The backend's response body.
        """
        try:
            data = _unwrap(await self.client.update_product(product_id, draft, token))
        except StorefrontError as e:
            self.notifications.error(f"Failed to update product: {e}")
            raise
        logger.info("Product updated", product_id=product_id)
        self.notifications.success("Product updated successfully")
        return data

    async def delete(self, product_id: str, token: str) -> None:
        """Delete a product.

        Args:
            product_id: Product identifier.
            token: Admin bearer token.
        """
        try:
            _unwrap(await self.client.delete_product(product_id, token))
        except StorefrontError as e:
            self.notifications.error(f"Failed to delete product: {e}")
            raise
        logger.info("Product deleted", product_id=product_id)
        self.notifications.success("Product deleted successfully")


# ============================================================================
# Single-fetch pages
# ============================================================================


async def fetch_product_detail(client: StorefrontAPIClient, slug: str) -> ProductSchema:
    """Load one product by slug for its detail page."""
    data = _unwrap(await client.get_product(slug))
    return _parse(ProductDetailResponse, data).product


async def fetch_category_products(
    client: StorefrontAPIClient,
    slug: str,
) -> CategoryProductsResponse:
    """Load every product of one category, with the category itself."""
    data = _unwrap(await client.products_by_category(slug))
    return _parse(CategoryProductsResponse, data)


async def fetch_admin_profile(client: StorefrontAPIClient, token: str) -> AdminProfileResponse:
    """Load the signed-in admin's profile for the dashboard.

    Args:
        client: Storefront API client.
        token: Admin bearer token.

    Returns:
        The admin's name, email, and phone.

    Raises:
        NetworkFailure: If the request got no response.
        ServerRejection: If the backend refused the token or answered with
            a malformed profile.
    """
    data = _unwrap(await client.get_user_data(token))
    return _parse(AdminProfileResponse, data)
