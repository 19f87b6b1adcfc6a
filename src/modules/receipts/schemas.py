"""Schemas for Receipts module."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from src.modules.warehouses.schemas import WarehouseSummary


class ReceiptLineCreate(BaseModel):
    product_id: int
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(Decimal("0.00"), ge=0, decimal_places=2)


class ReceiptCreate(BaseModel):
    """Create a draft receipt; receipt_number is allocated when omitted."""

    receipt_number: str | None = Field(None, max_length=50)
    warehouse_id: int
    supplier_name: str = Field(..., min_length=1, max_length=200)
    notes: str | None = None
    items: list[ReceiptLineCreate] = Field(..., min_length=1)

    @field_validator("supplier_name")
    @classmethod
    def strip_supplier_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Supplier name is required")
        return v


class ReceiptFilters(BaseModel):
    warehouse_id: int | None = None
    status: str | None = None
    search: str | None = None
    page: int = 1
    limit: int = 50


class ReceiptLineResponse(BaseModel):
    id: int
    receipt_id: int
    product_id: int
    product_name: str | None = None
    product_sku: str | None = None
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class ReceiptResponse(BaseModel):
    id: int
    receipt_number: str
    warehouse_id: int
    supplier_name: str
    status: str
    notes: str | None
    created_by_id: int
    created_at: datetime
    updated_at: datetime
    validated_at: datetime | None
    total_quantity: int
    total_amount: Decimal
    warehouse: WarehouseSummary | None = None
    items: list[ReceiptLineResponse] = []
