"""Shared fixtures for E2E tests.

These fixtures run the storefront client against the mock product API
in-process, through httpx's ASGI transport.
"""

import httpx
import pytest
import pytest_asyncio

from storefront.api_client import StorefrontAPIClient
from storefront.catalog.orchestrator import CatalogOrchestrator
from storefront.mock_api.chaos import ChaosController
from storefront.mock_api.main import MockAPISettings, create_app
from storefront.mock_api.products import ProductStore
from storefront.notifications import NotificationCenter

BASE_URL = "http://testserver"
ADMIN_TOKEN = "e2e-admin-token"


# ============================================================================
# Mock API Fixtures
# ============================================================================


@pytest.fixture
def product_store() -> ProductStore:
    """20 products, 6 per listing page."""
    return ProductStore(seed=42, product_count=20, page_size=6)


@pytest.fixture
def chaos() -> ChaosController:
    return ChaosController()


@pytest.fixture
def transport(product_store, chaos) -> httpx.ASGITransport:
    """ASGI transport serving the mock product API."""
    app = create_app(
        store=product_store,
        chaos=chaos,
        settings=MockAPISettings(admin_token=ADMIN_TOKEN),
    )
    return httpx.ASGITransport(app=app)


# ============================================================================
# Client Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def api_client(transport):
    """Storefront API client wired to the mock API."""
    client = StorefrontAPIClient(base_url=BASE_URL, transport=transport)
    yield client
    await client.close()


@pytest.fixture
def notifications() -> NotificationCenter:
    return NotificationCenter()


@pytest.fixture
def catalog(api_client, notifications) -> CatalogOrchestrator:
    return CatalogOrchestrator(api_client, notifications=notifications)
