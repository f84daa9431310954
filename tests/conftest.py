"""Shared fixtures for storefront tests."""

import asyncio
from dataclasses import dataclass

import pytest

from storefront.api_client import APIError, APIResponse
from storefront.catalog.orchestrator import CatalogOrchestrator
from storefront.catalog.query import CatalogRequest, QueryKind
from storefront.cart.storage import InMemoryStorage
from storefront.cart.store import CartStore
from storefront.notifications import NotificationCenter
from storefront.schemas import ProductSchema


# ============================================================================
# Sample Data
# ============================================================================


def make_product(
    index: int,
    category: str = "cat-1",
    price: float = 10.0,
) -> ProductSchema:
    """Create a sample product."""
    return ProductSchema(
        id=f"prod-{index}",
        name=f"Product {index}",
        description=f"Description of product {index}",
        price=price,
        category=category,
        shipping=True,
        slug=f"product-{index}",
    )


def make_success_response(data: dict) -> APIResponse:
    """Create a successful API response."""
    return APIResponse(success=True, data=data)


def make_error_response(
    error_code: str,
    message: str,
    status_code: int = 500,
) -> APIResponse:
    """Create an error API response."""
    return APIResponse(
        success=False,
        error=APIError(
            error_code=error_code,
            message=message,
            status_code=status_code,
        ),
    )


async def settle() -> None:
    """Let every ready task run until it blocks again."""
    for _ in range(10):
        await asyncio.sleep(0)


# ============================================================================
# Fake Gateway
# ============================================================================


@dataclass
class HeldRequest:
    """A request the fake gateway has not answered yet."""

    request: CatalogRequest
    future: asyncio.Future


class FakeCatalogGateway:
    """In-process stand-in for the product API.

    Answers from a fixed product list. With ``hold`` set, requests wait
    until the test releases them, so completion order is under test control.
    """

    def __init__(
        self,
        products: list[ProductSchema],
        page_size: int = 20,
        total: int | None = None,
    ) -> None:
        self.products = products
        self.page_size = page_size
        self.total = total
        self.hold = False
        self.held: list[HeldRequest] = []
        self.requests: list[CatalogRequest] = []
        self.failures: dict[QueryKind, APIResponse] = {}

    async def execute(self, request: CatalogRequest) -> APIResponse:
        self.requests.append(request)
        if self.hold:
            future = asyncio.get_running_loop().create_future()
            self.held.append(HeldRequest(request=request, future=future))
            return await future
        return self.answer(request)

    def requests_of(self, kind: QueryKind) -> list[CatalogRequest]:
        return [r for r in self.requests if r.kind is kind]

    def held_of(self, kind: QueryKind) -> list[HeldRequest]:
        return [h for h in self.held if h.request.kind is kind]

    def release(self, held: HeldRequest, response: APIResponse | None = None) -> None:
        held.future.set_result(response or self.answer(held.request))

    def release_all(self) -> None:
        for held in self.held:
            if not held.future.done():
                self.release(held)

    def filtered(self, checked: list[str], radio: list[float]) -> list[ProductSchema]:
        return [
            p
            for p in self.products
            if (not checked or p.category_id in checked)
            and (not radio or radio[0] <= p.price <= radio[1])
        ]

    def answer(self, request: CatalogRequest) -> APIResponse:
        if request.kind in self.failures:
            return self.failures[request.kind]

        if request.kind is QueryKind.LISTING:
            start = (request.page - 1) * self.page_size
            page = self.products[start:start + self.page_size]
            return make_success_response({"products": [p.to_payload() for p in page]})
        if request.kind is QueryKind.TOTAL_COUNT:
            total = self.total if self.total is not None else len(self.products)
            return make_success_response({"total": total})
        if request.kind is QueryKind.FILTERED:
            matches = self.filtered(request.body["checked"], request.body["radio"])
            return make_success_response({"products": [p.to_payload() for p in matches]})
        return make_success_response({
            "category": [
                {"_id": "cat-1", "name": "Electronics", "slug": "electronics"},
                {"_id": "cat-2", "name": "Books", "slug": "books"},
            ],
        })


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def catalog_products() -> list[ProductSchema]:
    """45 products alternating between two categories and rising prices."""
    return [
        make_product(i, category="cat-1" if i % 2 else "cat-2", price=float(i))
        for i in range(1, 46)
    ]


@pytest.fixture
def gateway(catalog_products) -> FakeCatalogGateway:
    """Fake gateway with page size 20 over the sample catalog."""
    return FakeCatalogGateway(catalog_products, page_size=20)


@pytest.fixture
def notifications() -> NotificationCenter:
    return NotificationCenter()


@pytest.fixture
def orchestrator(gateway, notifications) -> CatalogOrchestrator:
    """Orchestrator wired to the fake gateway."""
    return CatalogOrchestrator(gateway, notifications=notifications)


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def cart_store(storage, notifications) -> CartStore:
    return CartStore(storage, notifications=notifications)
