"""Schemas for Deliveries module."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from src.modules.warehouses.schemas import WarehouseSummary


class DeliveryLineCreate(BaseModel):
    product_id: int
    quantity: int = Field(..., gt=0)
    unit_price: Decimal | None = Field(None, ge=0, decimal_places=2)


class DeliveryCreate(BaseModel):
    """Create a draft delivery; delivery_number is allocated when omitted."""

    delivery_number: str | None = Field(None, max_length=50)
    warehouse_id: int
    customer_name: str = Field(..., min_length=1, max_length=200)
    notes: str | None = None
    items: list[DeliveryLineCreate] = Field(..., min_length=1)

    @field_validator("customer_name")
    @classmethod
    def strip_customer_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Customer name is required")
        return v


class DeliveryFilters(BaseModel):
    warehouse_id: int | None = None
    status: str | None = None
    search: str | None = None
    page: int = 1
    limit: int = 50


class DeliveryLineResponse(BaseModel):
    id: int
    product_id: int
    product_name: str | None = None
    product_sku: str | None = None
    quantity: int
    unit_price: Decimal | None = None


class DeliveryResponse(BaseModel):
    id: int
    delivery_number: str
    warehouse_id: int
    customer_name: str
    status: str
    notes: str | None
    created_by_id: int
    created_at: datetime
    updated_at: datetime
    validated_at: datetime | None
    warehouse: WarehouseSummary | None = None
    items: list[DeliveryLineResponse] = []
