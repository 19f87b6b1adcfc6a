from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class BaseSchema(BaseModel):
    """Schema readable straight from ORM objects."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class SuccessResponse(BaseSchema, Generic[T]):
    """``{"success": true, "data": ..., "message": ...}`` envelope."""

    success: bool = True
    data: T
    message: str | None = None


ApiResponse = SuccessResponse


class ErrorDetail(BaseSchema):
    field: str | None = None
    message: str


class ErrorResponse(BaseSchema):
    """Body of every 4xx/5xx except the next-number endpoints."""

    success: bool = False
    data: None = None
    message: str
    errors: list[ErrorDetail] = []


class PaginatedResponse(BaseSchema, Generic[T]):
    items: list[T]
    total: int
    page: int
    limit: int
    pages: int

    @classmethod
    def create(cls, items: list[T], total: int, page: int, limit: int) -> "PaginatedResponse[T]":
        """Build a page; ``pages`` is rounded up and 0 when ``limit`` is 0."""
        pages = -(-total // limit) if limit > 0 else 0
        return cls(items=items, total=total, page=page, limit=limit, pages=pages)


class NextNumberResponse(BaseModel):
    """Bare body of ``GET /api/<kind>/next-number``."""

    next: str


class NextNumberError(BaseModel):
    error: str
