from src.shared.schemas.base import (
    ApiResponse,
    BaseSchema,
    ErrorDetail,
    ErrorResponse,
    NextNumberError,
    NextNumberResponse,
    PaginatedResponse,
    SuccessResponse,
)

__all__ = [
    "ApiResponse",
    "BaseSchema",
    "ErrorDetail",
    "ErrorResponse",
    "NextNumberError",
    "NextNumberResponse",
    "PaginatedResponse",
    "SuccessResponse",
]
