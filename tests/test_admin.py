"""Tests for the admin surface and single-fetch pages."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from storefront.admin import (
    AdminGate,
    AdminProductService,
    fetch_admin_profile,
    fetch_category_products,
    fetch_product_detail,
)
from storefront.api_client import StorefrontAPIClient
from storefront.exceptions import NetworkFailure, ServerRejection
from storefront.notifications import NotificationCenter, NotificationLevel
from storefront.schemas import ProductDraft
from tests.conftest import make_error_response, make_product, make_success_response


@pytest.fixture
def mock_api_client() -> MagicMock:
    """Create a mock storefront API client."""
    client = MagicMock(spec=StorefrontAPIClient)
    client.check_admin_auth = AsyncMock()
    client.get_user_data = AsyncMock()
    client.get_product = AsyncMock()
    client.products_by_category = AsyncMock()
    client.create_product = AsyncMock()
    client.update_product = AsyncMock()
    client.delete_product = AsyncMock()
    return client


@pytest.fixture
def draft() -> ProductDraft:
    return ProductDraft(
        name="Lamp",
        description="Desk lamp",
        price=25.0,
        quantity=3,
        category="cat-4",
    )


class TestAdminGate:
    """Tests for the admin gate."""

    @pytest.mark.asyncio
    async def test_allows_confirmed_token(self, mock_api_client):
        mock_api_client.check_admin_auth.return_value = make_success_response({"ok": True})

        assert await AdminGate(mock_api_client).check("token") is True
        mock_api_client.check_admin_auth.assert_called_once_with("token")

    @pytest.mark.asyncio
    async def test_denies_without_token(self, mock_api_client):
        assert await AdminGate(mock_api_client).check(None) is False
        mock_api_client.check_admin_auth.assert_not_called()

    @pytest.mark.asyncio
    async def test_denies_when_backend_says_no(self, mock_api_client):
        mock_api_client.check_admin_auth.return_value = make_success_response({"ok": False})

        assert await AdminGate(mock_api_client).check("token") is False

    @pytest.mark.asyncio
    async def test_denies_on_rejection(self, mock_api_client):
        mock_api_client.check_admin_auth.return_value = make_error_response(
            "UNAUTHORIZED", "Admin access required", 401
        )

        assert await AdminGate(mock_api_client).check("token") is False

    @pytest.mark.asyncio
    async def test_denies_on_transport_error(self, mock_api_client):
        mock_api_client.check_admin_auth.return_value = make_error_response(
            "TIMEOUT", "timed out", 504
        )

        assert await AdminGate(mock_api_client).check("token") is False

    @pytest.mark.asyncio
    async def test_denies_on_malformed_body(self, mock_api_client):
        mock_api_client.check_admin_auth.return_value = make_success_response(
            {"ok": {"nested": True}}
        )

        assert await AdminGate(mock_api_client).check("token") is False


class TestAdminProductService:
    """Tests for admin product CRUD."""

    @pytest.fixture
    def notifications(self) -> NotificationCenter:
        return NotificationCenter()

    @pytest.fixture
    def service(self, mock_api_client, notifications) -> AdminProductService:
        return AdminProductService(mock_api_client, notifications=notifications)

    @pytest.mark.asyncio
    async def test_create_success(self, service, mock_api_client, notifications, draft):
        mock_api_client.create_product.return_value = make_success_response(
            {"success": True, "product": make_product(1).to_payload()}
        )

        data = await service.create(draft, token="admin")

        assert data["product"]["_id"] == "prod-1"
        mock_api_client.create_product.assert_called_once_with(draft, "admin")
        assert notifications.history[-1].message == "Product created successfully"

    @pytest.mark.asyncio
    async def test_create_failure_notifies_and_raises(
        self, service, mock_api_client, notifications, draft
    ):
        mock_api_client.create_product.return_value = make_error_response(
            "UNAUTHORIZED", "Admin access required", 401
        )

        with pytest.raises(ServerRejection) as exc_info:
            await service.create(draft, token="bad")

        assert exc_info.value.status_code == 401
        assert notifications.history[-1].level is NotificationLevel.ERROR
        assert "Admin access required" in notifications.history[-1].message

    @pytest.mark.asyncio
    async def test_update_success(self, service, mock_api_client, notifications, draft):
        mock_api_client.update_product.return_value = make_success_response(
            {"success": True, "product": make_product(1).to_payload()}
        )

        await service.update("prod-1", draft, token="admin")

        mock_api_client.update_product.assert_called_once_with("prod-1", draft, "admin")
        assert notifications.history[-1].message == "Product updated successfully"

    @pytest.mark.asyncio
    async def test_update_network_failure(self, service, mock_api_client, notifications, draft):
        mock_api_client.update_product.return_value = make_error_response(
            "REQUEST_ERROR", "Request failed: connection refused", 500
        )

        with pytest.raises(NetworkFailure):
            await service.update("prod-1", draft, token="admin")

        assert notifications.history[-1].level is NotificationLevel.ERROR

    @pytest.mark.asyncio
    async def test_delete_success(self, service, mock_api_client, notifications):
        mock_api_client.delete_product.return_value = make_success_response(
            {"success": True}
        )

        await service.delete("prod-1", token="admin")

        assert notifications.history[-1].message == "Product deleted successfully"

    @pytest.mark.asyncio
    async def test_delete_failure(self, service, mock_api_client, notifications):
        mock_api_client.delete_product.return_value = make_error_response(
            "REJECTED", "No product 'prod-x'", 200
        )

        with pytest.raises(ServerRejection):
            await service.delete("prod-x", token="admin")

        assert notifications.history[-1].message.startswith("Failed to delete product")

    @pytest.mark.asyncio
    async def test_get_delegates_to_detail_fetch(self, service, mock_api_client):
        mock_api_client.get_product.return_value = make_success_response(
            {"success": True, "product": make_product(2).to_payload()}
        )

        product = await service.get("product-2")

        assert product.id == "prod-2"
        mock_api_client.get_product.assert_called_once_with("product-2")


class TestSingleFetchPages:
    """Tests for product detail and category pages."""

    @pytest.mark.asyncio
    async def test_product_detail_with_embedded_category(self, mock_api_client):
        payload = make_product(3).to_payload()
        payload["category"] = {"_id": "cat-1", "name": "Electronics", "slug": "electronics"}
        mock_api_client.get_product.return_value = make_success_response(
            {"success": True, "product": payload}
        )

        product = await fetch_product_detail(mock_api_client, "product-3")

        assert product.category_id == "cat-1"
        assert product.category.name == "Electronics"

    @pytest.mark.asyncio
    async def test_product_detail_not_found(self, mock_api_client):
        mock_api_client.get_product.return_value = make_error_response(
            "PRODUCT_NOT_FOUND", "No product 'x'", 404
        )

        with pytest.raises(ServerRejection) as exc_info:
            await fetch_product_detail(mock_api_client, "x")

        assert exc_info.value.error_code == "PRODUCT_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_product_detail_malformed(self, mock_api_client):
        mock_api_client.get_product.return_value = make_success_response({"success": True})

        with pytest.raises(ServerRejection) as exc_info:
            await fetch_product_detail(mock_api_client, "x")

        assert exc_info.value.error_code == "INVALID_RESPONSE"

    @pytest.mark.asyncio
    async def test_category_products(self, mock_api_client):
        mock_api_client.products_by_category.return_value = make_success_response({
            "success": True,
            "category": {"_id": "cat-2", "name": "Books", "slug": "books"},
            "products": [make_product(2, category="cat-2").to_payload()],
        })

        page = await fetch_category_products(mock_api_client, "books")

        assert page.category.slug == "books"
        assert [p.id for p in page.products] == ["prod-2"]


class TestAdminProfile:
    """Tests for the admin dashboard profile fetch."""

    @pytest.mark.asyncio
    async def test_profile(self, mock_api_client):
        mock_api_client.get_user_data.return_value = make_success_response({
            "name": "Store Admin",
            "email": "admin@example.com",
            "phone": "555-0100",
        })

        profile = await fetch_admin_profile(mock_api_client, "admin")

        assert profile.name == "Store Admin"
        assert profile.email == "admin@example.com"
        assert profile.phone == "555-0100"
        mock_api_client.get_user_data.assert_called_once_with("admin")

    @pytest.mark.asyncio
    async def test_profile_rejected(self, mock_api_client):
        mock_api_client.get_user_data.return_value = make_error_response(
            "UNAUTHORIZED", "Admin access required", 401
        )

        with pytest.raises(ServerRejection) as exc_info:
            await fetch_admin_profile(mock_api_client, "bad")

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_profile_malformed(self, mock_api_client):
        mock_api_client.get_user_data.return_value = make_success_response({"name": "x"})

        with pytest.raises(ServerRejection) as exc_info:
            await fetch_admin_profile(mock_api_client, "admin")

        assert exc_info.value.error_code == "INVALID_RESPONSE"
