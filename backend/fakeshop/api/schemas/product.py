"""Pydantic models describing Product payloads."""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Generic, TypeVar

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    field_serializer,
    field_validator,
)

from fakeshop.services.catalog_product import Origin
from fakeshop.services.products import NewProduct

T = TypeVar("T")

CENT = Decimal("0.01")
# Largest value the Numeric(10, 2) price column holds.
MAX_PRICE = Decimal("99999999.99")


class ProductCreate(BaseModel):
    """Schema for UI-created product rows."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., description="The title of the product", examples=["Product Name"])
    price: Decimal = Field(..., gt=0, description="The price of the product")
    description: str = Field(..., description="The description of the product")
    category: str = Field(..., description="The category of the product", examples=["electronics"])
    image: AnyHttpUrl = Field(..., description="The image URL of the product")

    @field_validator("title", "description", "category")
    @classmethod
    def not_blank(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("must not be empty")
        return stripped

    @field_validator("price")
    @classmethod
    def round_to_cents(cls, v: Decimal) -> Decimal:
        """Round half-up to whole cents; the result must stay a storable positive price."""
        if v >= MAX_PRICE + CENT / 2:
            raise ValueError(f"must not exceed {MAX_PRICE}")
        rounded = v.quantize(CENT, rounding=ROUND_HALF_UP)
        if rounded <= 0:
            raise ValueError("must be at least 0.01 after rounding to cents")
        return rounded

    def to_new_product(self) -> NewProduct:
        return NewProduct(
            title=self.title,
            price=self.price,
            description=self.description,
            category=self.category,
            image=str(self.image),
        )


class StockUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    stock: StrictInt = Field(..., ge=0, description="The stock quantity of the product")


class ProductRead(BaseModel):
    id: int
    title: str
    price: Decimal
    description: str
    category: str
    image: str
    stock: int
    is_local: bool
    origin: Origin
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}

    @field_serializer("price")
    def serialize_price(self, value: Decimal) -> float:
        return float(value)

    @field_serializer("created_at", "updated_at")
    def serialize_timestamp(self, value: datetime | None) -> str | None:
        """Convert datetime to ISO format string."""
        if value is None:
            return None
        return value.isoformat()


class ApiResponse(BaseModel, Generic[T]):
    """Envelope wrapped around every successful JSON response."""

    data: T
    success: bool = True
    timestamp: datetime


class ErrorResponse(BaseModel):
    status_code: int
    timestamp: datetime
    path: str
    method: str
    message: str | None = None
    error: str
