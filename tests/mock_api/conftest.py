"""Pytest fixtures for mock product API tests."""

import pytest
from fastapi.testclient import TestClient

from storefront.mock_api.chaos import get_chaos_controller, reset_chaos_controller
from storefront.mock_api.main import MockAPISettings, create_app
from storefront.mock_api.products import get_product_store, reset_product_store

ADMIN_TOKEN = "test-admin-token"


@pytest.fixture(autouse=True)
def reset_stores():
    """Reset all stores before each test."""
    reset_product_store()
    reset_chaos_controller()
    yield
    reset_product_store()
    reset_chaos_controller()


@pytest.fixture
def mock_settings():
    return MockAPISettings(admin_token=ADMIN_TOKEN, product_count=20, page_size=6)


@pytest.fixture
def client(mock_settings):
    """Create test client."""
    with TestClient(create_app(settings=mock_settings)) as client:
        yield client


@pytest.fixture
def product_store(client):
    """Get the product store the app serves from."""
    return get_product_store()


@pytest.fixture
def chaos_controller(client):
    """Get the chaos controller the app consults."""
    return get_chaos_controller()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}
