"""Schemas for Adjustments module."""

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from src.modules.inventory.schemas import ProductSummary
from src.modules.warehouses.schemas import WarehouseSummary


class AdjustmentCreate(BaseModel):
    """Create an adjustment.

    adjustment_number is the number shown on the form (from next-number, or a
    client fallback); when omitted the server allocates one.
    """

    adjustment_number: str | None = Field(None, max_length=50)
    warehouse_id: int
    product_id: int | None = None
    new_product_name: str | None = Field(None, max_length=255)
    increase_by: int = Field(0, ge=0)
    decrease_by: int = Field(0, ge=0)
    notes: str | None = None

    @model_validator(mode="after")
    def check_product_and_quantity(self):
        if self.product_id is None and not (self.new_product_name or "").strip():
            raise ValueError("Either product_id or new_product_name is required")
        if self.increase_by <= 0 and self.decrease_by <= 0:
            raise ValueError("Provide an increase or decrease quantity")
        return self


class AdjustmentFilters(BaseModel):
    warehouse_id: int | None = None
    product_id: int | None = None
    status: str | None = None
    search: str | None = None
    page: int = 1
    limit: int = 50


class AdjustmentResponse(BaseModel):
    id: int
    adjustment_number: str
    warehouse_id: int
    product_id: int
    system_quantity: int
    counted_quantity: int
    difference: int
    reason: str | None
    status: str
    created_by_id: int
    created_at: datetime
    updated_at: datetime
    validated_at: datetime | None
    product: ProductSummary | None = None
    warehouse: WarehouseSummary | None = None
