"""Schemas for Warehouses module."""

from datetime import datetime

from pydantic import Field, field_validator

from src.shared.schemas import BaseSchema


class WarehouseCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=200)
    code: str | None = Field(None, max_length=20)
    location: str | None = Field(None, max_length=500)

    @field_validator("name", "code", "location")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class WarehouseUpdate(BaseSchema):
    name: str | None = Field(None, min_length=1, max_length=200)
    code: str | None = Field(None, max_length=20)
    location: str | None = Field(None, max_length=500)
    is_active: bool | None = None


class WarehouseResponse(BaseSchema):
    id: int
    name: str
    code: str | None
    location: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class WarehouseSummary(BaseSchema):
    """Compact warehouse info embedded in document responses."""

    id: int
    name: str
    location: str | None = None
