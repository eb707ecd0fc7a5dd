"""Pydantic schemas for product operations."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator


class ProductCreateRequest(BaseModel):
    """Request schema for creating a product."""

    name: str = Field(..., min_length=2, max_length=200)
    price: float = Field(..., gt=0, description="Price must be positive")
    image_url: HttpUrl | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        return v


class AddSaleRequest(BaseModel):
    """Request schema for recording a manual sale.

    Missing or non-positive quantities count as one unit.
    """

    quantity: int | None = None

    @property
    def effective_quantity(self) -> int:
        if self.quantity is None or self.quantity <= 0:
            return 1
        return self.quantity


class ProductResponse(BaseModel):
    """Product record."""

    id: int
    shopify_id: str
    name: str
    price: float
    image_url: str | None = None
    sales_count: int
    created_by: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductCreateResponse(BaseModel):
    """Response for product creation. ``mock`` is set in mock mode."""

    product: ProductResponse
    mock: bool | None = None
    message: str | None = None


class ProductListResponse(BaseModel):
    """List of products."""

    products: list[ProductResponse]
    count: int


class BestsellersResponse(BaseModel):
    """The caller's products ordered by units sold."""

    bestsellers: list[ProductResponse]
    count: int


class AddSaleResponse(BaseModel):
    """Response for a recorded sale."""

    success: bool = True
    message: str
    product: ProductResponse
