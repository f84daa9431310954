"""Storefront API Client.

Thin HTTP client for the product, category, and admin endpoints.
This module handles authentication, error handling, and response parsing.
Transport problems are returned as failed APIResponse objects rather than
raised, so every caller sees one envelope shape.
"""

from dataclasses import dataclass, field
from typing import Any

import httpx
import structlog

from storefront.catalog.facets import FacetSelection
from storefront.catalog.query import (
    CatalogRequest,
    category_list_query,
    filtered_query,
    listing_page_query,
    total_count_query,
)
from storefront.exceptions import NetworkFailure, ServerRejection, StorefrontError
from storefront.schemas import ProductDraft

logger = structlog.get_logger()

# Client-side error codes for requests that never got a usable response
TRANSPORT_ERROR_CODES = frozenset({"TIMEOUT", "REQUEST_ERROR"})


@dataclass
class APIError:
    """Represents an API error response."""

    error_code: str
    message: str
    status_code: int
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def is_transport_error(self) -> bool:
        """True if no response was received from the server."""
        return self.error_code in TRANSPORT_ERROR_CODES


@dataclass
class APIResponse:
    """Represents an API response."""

    success: bool
    data: dict[str, Any] | list[Any] | None = None
    error: APIError | None = None


def api_error_to_exception(error: APIError | None) -> StorefrontError:
    """Translate a failed response envelope into a storefront exception.

    Args:
        error: Error carried by a failed APIResponse.

    Returns:
        NetworkFailure for transport errors, ServerRejection otherwise.
    """
    if error is None:
        return ServerRejection("Unknown error", status_code=500, error_code="UNKNOWN_ERROR")
    if error.is_transport_error:
        return NetworkFailure(error.message, error_code=error.error_code)
    return ServerRejection(
        error.message,
        status_code=error.status_code,
        error_code=error.error_code,
    )


class StorefrontAPIClient:
    """HTTP client for the storefront product API.

    Provides methods for every endpoint used by the catalog browser, the
    single-fetch pages, and the admin surface.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the API client.

        Args:
            base_url: Product API base URL.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (e.g. ASGITransport for tests).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        token: str | None = None,
    ) -> APIResponse:
        """Make an API request.

        Args:
            method: HTTP method.
            path: API endpoint path.
            json: Request body as JSON.
            token: Optional bearer token.

        Returns:
            APIResponse with success status and data or error.
        """
        client = await self._get_client()

        headers = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            logger.debug(
                "Making API request",
                method=method,
                path=path,
                has_body=json is not None,
            )

            response = await client.request(
                method=method,
                url=path,
                json=json,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            logger.error("API request timeout", path=path, error=str(e))
            return APIResponse(
                success=False,
                error=APIError(
                    error_code="TIMEOUT",
                    message=f"Request timed out: {path}",
                    status_code=504,
                ),
            )
        except httpx.RequestError as e:
            logger.error("API request failed", path=path, error=str(e))
            return APIResponse(
                success=False,
                error=APIError(
                    error_code="REQUEST_ERROR",
                    message=f"Request failed: {str(e)}",
                    status_code=500,
                ),
            )

        if response.status_code == 204:
            return APIResponse(success=True, data=None)

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.status_code >= 400:
            error_data = data if isinstance(data, dict) else {}
            logger.warning(
                "API request rejected",
                path=path,
                status_code=response.status_code,
            )
            return APIResponse(
                success=False,
                error=APIError(
                    error_code=error_data.get("error_code", "UNKNOWN_ERROR"),
                    message=error_data.get("message", f"HTTP {response.status_code}"),
                    status_code=response.status_code,
                    details=error_data.get("details", {}),
                ),
            )

        if data is None:
            return APIResponse(
                success=False,
                error=APIError(
                    error_code="INVALID_RESPONSE",
                    message=f"Response body is not JSON: {path}",
                    status_code=response.status_code,
                ),
            )

        # The backend reports some failures as 2xx with success=false
        if isinstance(data, dict) and data.get("success") is False:
            logger.warning("API request unsuccessful", path=path)
            return APIResponse(
                success=False,
                data=data,
                error=APIError(
                    error_code=data.get("error_code", "REJECTED"),
                    message=data.get("message", "Request was not successful"),
                    status_code=response.status_code,
                ),
            )

        return APIResponse(success=True, data=data)

    async def execute(self, request: CatalogRequest, token: str | None = None) -> APIResponse:
        """Issue a prebuilt catalog request.

        Args:
            request: Request descriptor.
            token: Optional bearer token.

        Returns:
            APIResponse for the request.
        """
        return await self._request(
            method=request.method,
            path=request.path,
            json=request.body,
            token=token,
        )

    # =========================================================================
    # Catalog Endpoints
    # =========================================================================

    async def list_products(self, page: int = 1) -> APIResponse:
        """Get one page of the unfiltered listing.

        Args:
            page: Page number (1-indexed).

        Returns:
            APIResponse with ``{"products": [...]}``.
        """
        return await self.execute(listing_page_query(page))

    async def count_products(self) -> APIResponse:
        """Get the total number of products.

        Returns:
            APIResponse with ``{"total": int}``.
        """
        return await self.execute(total_count_query())

    async def filter_products(self, selection: FacetSelection) -> APIResponse:
        """Get every product matching a facet selection.

        Args:
            selection: Non-empty facet selection.

        Returns:
            APIResponse with ``{"products": [...]}``.
        """
        return await self.execute(filtered_query(selection))

    async def list_categories(self) -> APIResponse:
        """Get the category facet list.

        Returns:
            APIResponse with ``{"category": [...]}``.
        """
        return await self.execute(category_list_query())

    async def get_product(self, slug: str) -> APIResponse:
        """Get a product by slug.

        Args:
            slug: Product slug.

        Returns:
            APIResponse with ``{"product": {...}}``.
        """
        return await self._request(
            method="GET",
            path=f"/api/v1/product/get-product/{slug}",
        )

    async def products_by_category(self, slug: str) -> APIResponse:
        """Get all products of one category.

        Args:
            slug: Category slug.

        Returns:
            APIResponse with ``{"products": [...], "category": {...}}``.
        """
        return await self._request(
            method="GET",
            path=f"/api/v1/product/product-category/{slug}",
        )

    # =========================================================================
    # Admin Endpoints
    # =========================================================================

    async def check_admin_auth(self, token: str) -> APIResponse:
        """Ask the backend whether a token belongs to an admin.

        Args:
            token: Bearer token.

        Returns:
            APIResponse with ``{"ok": bool}``.
        """
        return await self._request(
            method="GET",
            path="/api/v1/auth/admin-auth",
            token=token,
        )

    async def get_user_data(self, token: str) -> APIResponse:
        """Get the profile of the user a token belongs to.

        Args:
            token: Bearer token.

        Returns:
            APIResponse with ``{"name", "email", "phone"}``.
        """
        return await self._request(
            method="GET",
            path="/api/v1/auth/user-data",
            token=token,
        )

    async def create_product(self, draft: ProductDraft, token: str) -> APIResponse:
        """Create a product.

        Args:
            draft: Validated product fields.
            token: Admin bearer token.

        Returns:
            APIResponse with the created product.
        """
        return await self._request(
            method="POST",
            path="/api/v1/product/create-product",
            json=draft.model_dump(),
            token=token,
        )

    async def update_product(
        self,
        product_id: str,
        draft: ProductDraft,
        token: str,
    ) -> APIResponse:
        """Update a product.

        Args:
            product_id: Product identifier.
            draft: Validated product fields.
            token: Admin bearer token.

        Returns:
            APIResponse with the updated product.
        """
        return await self._request(
            method="PUT",
            path=f"/api/v1/product/update-product/{product_id}",
            json=draft.model_dump(),
            token=token,
        )

    async def delete_product(self, product_id: str, token: str) -> APIResponse:
        """Delete a product.

        Args:
            product_id: Product identifier.
            token: Admin bearer token.

        Returns:
            APIResponse with the deletion result.
        """
        return await self._request(
            method="DELETE",
            path=f"/api/v1/product/delete-product/{product_id}",
            token=token,
        )
