from src.core.exceptions.base import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    DuplicateError,
    InsufficientStockError,
    InvalidDocumentKindError,
    NotFoundError,
    PersistenceUnavailableError,
    ValidationError,
)

__all__ = [
    # 4xx
    "AuthenticationError",
    "AuthorizationError",
    "DuplicateError",
    "InsufficientStockError",
    "NotFoundError",
    "ValidationError",
    # 5xx
    "InvalidDocumentKindError",
    "PersistenceUnavailableError",
    "AppException",
]
