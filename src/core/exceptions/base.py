from typing import Any


class AppException(Exception):
    """
    Base for errors rendered as ErrorResponse by the app handlers.

    Subclasses set ``status_code``; ``details`` may carry a ``field`` key
    that ends up in ``errors[0].field``.
    """

    status_code: int = 400

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    status_code = 404

    def __init__(self, resource: str, identifier: Any = None):
        if identifier is None:
            super().__init__(f"{resource} not found")
        else:
            super().__init__(f"{resource} with id={identifier} not found")


class ValidationError(AppException):
    """A business rule rejected the input."""

    status_code = 422

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, details={"field": field} if field else None)


class AuthenticationError(AppException):
    status_code = 401

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class AuthorizationError(AppException):
    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message)


class DuplicateError(AppException):
    """Unique value already taken: name, code, SKU, email or document number."""

    status_code = 409

    def __init__(self, resource: str, field: str, value: Any):
        super().__init__(
            f"{resource} with {field}={value} already exists",
            details={"field": field, "value": value},
        )


class InsufficientStockError(AppException):
    """Movement would take a warehouse's stock of a product below zero."""

    status_code = 400

    def __init__(self, product_id: int, warehouse_id: int, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for product {product_id} in warehouse {warehouse_id}: "
            f"requested {requested}, available {available}",
            details={
                "product_id": product_id,
                "warehouse_id": warehouse_id,
                "requested": requested,
                "available": available,
            },
        )


class PersistenceUnavailableError(AppException):
    """Existing document numbers could not be read from storage."""

    status_code = 503

    def __init__(self, message: str = "Document storage is unavailable"):
        super().__init__(message)


class InvalidDocumentKindError(AppException):
    """Unknown document kind (a routing or programming error)."""

    status_code = 500

    def __init__(self, kind: Any):
        super().__init__(f"Unknown document kind: {kind!r}", details={"kind": str(kind)})
