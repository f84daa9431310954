"""Mock product API.

A FastAPI app serving the storefront's HTTP contract from an in-memory
catalog, with chaos hooks for slow and failing responses. Used for local
development and end-to-end tests.
"""

from typing import Annotated, Any

from fastapi import Depends, FastAPI, Header, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

from storefront.mock_api.chaos import ChaosController, FailureMode, Route, get_chaos_controller
from storefront.mock_api.products import ProductStore, get_product_store
from storefront.schemas import ProductDraft, ProductFilterRequest


# ============================================================================
# Configuration
# ============================================================================


class MockAPISettings(BaseSettings):
    """Mock product API settings."""

    model_config = SettingsConfigDict(
        env_prefix="MOCK_API_",
        env_file=".env",
        extra="ignore",
    )

    admin_token: str = "dev-admin-token-change-in-production"
    admin_name: str = "Store Admin"
    admin_email: str = "admin@example.com"
    admin_phone: str = "555-0100"
    random_seed: int = 42
    product_count: int = 20
    page_size: int = 6
    host: str = "127.0.0.1"
    port: int = 8080


logger = structlog.get_logger()


def _chaos_response(failure: FailureMode, route: Route) -> JSONResponse:
    if failure is FailureMode.HTTP_ERROR:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error_code": "CHAOS_FAILURE",
                "message": f"Injected failure on {route.value}",
                "details": {},
            },
        )
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={"success": False, "message": f"Injected rejection on {route.value}"},
    )


def create_app(
    store: ProductStore | None = None,
    chaos: ChaosController | None = None,
    settings: MockAPISettings | None = None,
) -> FastAPI:
    """Build the mock product API.

    Args:
        store: Product store (the shared seeded store when omitted).
        chaos: Chaos controller (the shared controller when omitted).
        settings: Mock API settings.

    Returns:
        FastAPI application.
    """
    settings = settings or MockAPISettings()
    store = store or get_product_store(
        seed=settings.random_seed,
        product_count=settings.product_count,
        page_size=settings.page_size,
    )
    chaos = chaos or get_chaos_controller()

    app = FastAPI(
        title="Storefront Mock Product API",
        description="In-memory product API with injectable latency and failures.",
        version="1.0.0",
    )
    app.state.store = store
    app.state.chaos = chaos

    def require_admin(
        authorization: Annotated[str | None, Header()] = None,
    ) -> str:
        """Check the bearer token against the configured admin token."""
        token = (authorization or "").removeprefix("Bearer ").strip()
        if token != settings.admin_token:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail={"error_code": "UNAUTHORIZED", "message": "Admin access required"},
            )
        return token

    # ========================================================================
    # Catalog Endpoints
    # ========================================================================

    @app.get("/api/v1/product/product-list/{page}")
    async def product_list(page: int) -> Any:
        """Get one listing page."""
        if failure := await chaos.apply(Route.LISTING):
            return _chaos_response(failure, Route.LISTING)
        if page < 1:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"error_code": "INVALID_PAGE", "message": "Page must be >= 1"},
            )
        products = store.list_page(page)
        return {"success": True, "products": [p.to_payload() for p in products]}

    @app.get("/api/v1/product/product-count")
    async def product_count() -> Any:
        """Get the total product count."""
        if failure := await chaos.apply(Route.COUNT):
            return _chaos_response(failure, Route.COUNT)
        return {"success": True, "total": store.count()}

    @app.post("/api/v1/product/product-filters")
    async def product_filters(request: ProductFilterRequest) -> Any:
        """Get every product matching the selected facets."""
        if failure := await chaos.apply(Route.FILTERS):
            return _chaos_response(failure, Route.FILTERS)
        products = store.filter(request.checked, request.radio)
        return {"success": True, "products": [p.to_payload() for p in products]}

    @app.get("/api/v1/category/get-category")
    async def get_categories() -> Any:
        """Get all categories."""
        if failure := await chaos.apply(Route.CATEGORIES):
            return _chaos_response(failure, Route.CATEGORIES)
        return {
            "success": True,
            "message": "All categories list",
            "category": [c.model_dump(by_alias=True) for c in store.categories()],
        }

    @app.get("/api/v1/product/get-product/{slug}")
    async def get_product(slug: str) -> Any:
        """Get a product by slug."""
        product = store.get_by_slug(slug)
        if product is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"error_code": "PRODUCT_NOT_FOUND", "message": f"No product '{slug}'"},
            )
        return {"success": True, "product": product.to_payload()}

    @app.get("/api/v1/product/product-category/{slug}")
    async def product_category(slug: str) -> Any:
        """Get all products of a category."""
        category, products = store.by_category_slug(slug)
        if category is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"error_code": "CATEGORY_NOT_FOUND", "message": f"No category '{slug}'"},
            )
        return {
            "success": True,
            "category": category.model_dump(by_alias=True),
            "products": [p.to_payload() for p in products],
        }

    # ========================================================================
    # Admin Endpoints
    # ========================================================================

    @app.get("/api/v1/auth/admin-auth")
    async def admin_auth(_: Annotated[str, Depends(require_admin)]) -> Any:
        """Confirm admin access."""
        return {"ok": True}

    @app.get("/api/v1/auth/user-data")
    async def user_data(_: Annotated[str, Depends(require_admin)]) -> Any:
        """Get the signed-in admin's profile."""
        return {
            "name": settings.admin_name,
            "email": settings.admin_email,
            "phone": settings.admin_phone,
        }

    @app.post("/api/v1/product/create-product", status_code=status.HTTP_201_CREATED)
    async def create_product(
        draft: ProductDraft,
        _: Annotated[str, Depends(require_admin)],
    ) -> Any:
        """Create a product."""
        product = store.create(draft)
        logger.info("Mock product created", product_id=product.id)
        return {"success": True, "message": "Product created", "product": product.to_payload()}

    @app.put("/api/v1/product/update-product/{product_id}")
    async def update_product(
        product_id: str,
        draft: ProductDraft,
        _: Annotated[str, Depends(require_admin)],
    ) -> Any:
        """Update a product."""
        product = store.update(product_id, draft)
        if product is None:
            return {"success": False, "message": f"No product '{product_id}'"}
        return {"success": True, "message": "Product updated", "product": product.to_payload()}

    @app.delete("/api/v1/product/delete-product/{product_id}")
    async def delete_product(
        product_id: str,
        _: Annotated[str, Depends(require_admin)],
    ) -> Any:
        """Delete a product."""
        if not store.delete(product_id):
            return {"success": False, "message": f"No product '{product_id}'"}
        return {"success": True, "message": "Product deleted"}

    # ========================================================================
    # Chaos Endpoints
    # ========================================================================

    @app.post("/chaos/reset")
    async def reset_chaos() -> Any:
        """Reset chaos configuration."""
        chaos.reset()
        return {"reset": True}

    # ========================================================================
    # Error Handlers
    # ========================================================================

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request, exc: HTTPException):
        """Handle HTTP exceptions with consistent format."""
        detail = exc.detail
        if isinstance(detail, dict):
            return JSONResponse(
                status_code=exc.status_code,
                content={
                    "success": False,
                    "error_code": detail.get("error_code", "ERROR"),
                    "message": detail.get("message", str(detail)),
                    "details": detail.get("details", {}),
                },
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "error_code": "ERROR",
                "message": str(detail),
                "details": {},
            },
        )

    return app
