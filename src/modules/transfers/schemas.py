"""Schemas for Transfers module."""

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from src.modules.warehouses.schemas import WarehouseSummary


class TransferLineCreate(BaseModel):
    product_id: int
    quantity: int = Field(..., gt=0)


class TransferCreate(BaseModel):
    """Create a draft transfer; transfer_number is allocated when omitted.

    Lines may be added at creation only; a transfer without lines can be
    created but not validated.
    """

    transfer_number: str | None = Field(None, max_length=50)
    from_warehouse_id: int
    to_warehouse_id: int
    notes: str | None = None
    items: list[TransferLineCreate] = []

    @model_validator(mode="after")
    def check_distinct_warehouses(self):
        if self.from_warehouse_id == self.to_warehouse_id:
            raise ValueError("From and To warehouses must be different")
        return self


class TransferFilters(BaseModel):
    warehouse_id: int | None = None
    status: str | None = None
    search: str | None = None
    page: int = 1
    limit: int = 50


class TransferLineResponse(BaseModel):
    id: int
    product_id: int
    product_name: str | None = None
    product_sku: str | None = None
    quantity: int


class TransferResponse(BaseModel):
    id: int
    transfer_number: str
    from_warehouse_id: int
    to_warehouse_id: int
    status: str
    notes: str | None
    created_by_id: int
    created_at: datetime
    updated_at: datetime
    validated_at: datetime | None
    from_warehouse: WarehouseSummary | None = None
    to_warehouse: WarehouseSummary | None = None
    items: list[TransferLineResponse] = []
