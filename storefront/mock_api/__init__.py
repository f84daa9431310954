"""Mock product API for local development and end-to-end tests."""

from storefront.mock_api.chaos import ChaosController, FailureMode, Route
from storefront.mock_api.main import MockAPISettings, create_app
from storefront.mock_api.products import ProductStore

__all__ = [
    "ChaosController",
    "FailureMode",
    "MockAPISettings",
    "ProductStore",
    "Route",
    "create_app",
]
