"""Pydantic schemas for the product API.

Defines the wire models shared by the HTTP client, the cart snapshot
format, and the mock product API. Field aliases follow the backend's
JSON (``_id``), and unknown fields are preserved so that a product
payload survives a cart round trip unchanged.
"""

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Catalog Schemas
# ============================================================================


class CategorySchema(BaseModel):
    """Product category."""

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    id: str = Field(..., alias="_id", description="Category ID")
    name: str = Field(..., description="Display name")
    slug: str = Field(default="", description="URL slug")


class ProductSchema(BaseModel):
    """Product as returned by the catalog endpoints."""

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    id: str = Field(..., alias="_id", description="Product ID")
    name: str = Field(..., description="Display name")
    description: str = Field(default="", description="Product description")
    price: float = Field(..., ge=0, description="Price in major currency units")
    category: str | CategorySchema | None = Field(
        None, description="Category ID or embedded category"
    )
    shipping: bool = Field(default=False, description="Whether the product ships")
    slug: str = Field(default="", description="URL slug")
    quantity: int | None = Field(None, ge=0, description="Stock quantity")

    @property
    def category_id(self) -> str | None:
        """Get the category ID regardless of embedding."""
        if isinstance(self.category, CategorySchema):
            return self.category.id
        return self.category

    def to_payload(self) -> dict:
        """Serialize to the backend's JSON shape."""
        return self.model_dump(mode="json", by_alias=True)


# ============================================================================
# Response Schemas
# ============================================================================


class ProductListResponse(BaseModel):
    """Listing and filtered query response."""

    model_config = ConfigDict(extra="allow")

    success: bool = True
    products: list[ProductSchema] = Field(default_factory=list)


class ProductCountResponse(BaseModel):
    """Total product count response."""

    model_config = ConfigDict(extra="allow")

    success: bool = True
    total: int = Field(..., ge=0)


class CategoryListResponse(BaseModel):
    """Category facet list response."""

    model_config = ConfigDict(extra="allow")

    success: bool = True
    category: list[CategorySchema] = Field(default_factory=list)


class ProductDetailResponse(BaseModel):
    """Single product response."""

    model_config = ConfigDict(extra="allow")

    success: bool = True
    product: ProductSchema


class CategoryProductsResponse(BaseModel):
    """Products of one category, with the category itself."""

    model_config = ConfigDict(extra="allow")

    success: bool = True
    products: list[ProductSchema] = Field(default_factory=list)
    category: CategorySchema | None = None


# ============================================================================
# Request Schemas
# ============================================================================


class ProductFilterRequest(BaseModel):
    """Filtered query body.

    ``checked`` carries the selected category IDs and ``radio`` the
    selected price bucket as its ``[low, high]`` bounds (empty when no
    price bucket is selected).
    """

    checked: list[str] = Field(default_factory=list)
    radio: list[float] = Field(default_factory=list, max_length=2)


class ProductDraft(BaseModel):
    """Admin form payload for creating or updating a product."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=0)
    category: str = Field(..., min_length=1, description="Category ID")
    shipping: bool = False


class AdminAuthResponse(BaseModel):
    """Admin gate response."""

    model_config = ConfigDict(extra="allow")

    ok: bool = False


class AdminProfileResponse(BaseModel):
    """Signed-in admin's profile, shown on the admin dashboard."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Contact email")
    phone: str = Field(default="", description="Contact phone")
