"""Schemas for Inventory module."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from src.shared.schemas import BaseSchema


# --- Product Schemas ---


class ProductCreate(BaseModel):
    """Schema for creating a product."""

    name: str = Field(..., min_length=1, max_length=255)
    sku: str | None = Field(None, max_length=100)
    unit_of_measure: str = Field("unit", min_length=1, max_length=20)
    cost_price: Decimal = Field(Decimal("0.00"), ge=0, decimal_places=2)
    selling_price: Decimal = Field(Decimal("0.00"), ge=0, decimal_places=2)

    @field_validator("name", "sku")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class ProductUpdate(BaseModel):
    """Schema for updating a product."""

    name: str | None = Field(None, min_length=1, max_length=255)
    sku: str | None = Field(None, max_length=100)
    unit_of_measure: str | None = Field(None, min_length=1, max_length=20)
    cost_price: Decimal | None = Field(None, ge=0, decimal_places=2)
    selling_price: Decimal | None = Field(None, ge=0, decimal_places=2)
    is_active: bool | None = None


class ProductResponse(BaseSchema):
    """Schema for product response."""

    id: int
    name: str
    sku: str | None
    unit_of_measure: str
    cost_price: Decimal
    selling_price: Decimal
    is_active: bool
    current_stock: int = 0
    created_at: datetime
    updated_at: datetime


class ProductSummary(BaseSchema):
    """Compact product info embedded in document responses."""

    id: int
    name: str
    sku: str | None = None
    unit_of_measure: str | None = None


# --- Stock Schemas ---


class WarehouseStockResponse(BaseModel):
    """Quantity of a product in one warehouse."""

    product_id: int
    warehouse_id: int
    warehouse_name: str | None = None
    quantity: int


class StockMovementResponse(BaseSchema):
    """Schema for stock movement response."""

    id: int
    product_id: int
    warehouse_id: int
    movement_type: str
    quantity: int
    quantity_before: int
    quantity_after: int
    reference_type: str | None
    reference_id: int | None
    notes: str | None
    created_by_id: int
    created_at: datetime
