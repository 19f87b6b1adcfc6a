"""JSON rendering of errors as ErrorResponse bodies."""

import logging

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.core.config import settings
from src.core.exceptions import AppException
from src.shared.schemas import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(
    status_code: int, message: str, errors: list[ErrorDetail] | None = None
) -> JSONResponse:
    body = ErrorResponse(
        message=message,
        errors=errors if errors is not None else [ErrorDetail(message=message)],
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error_response(
        exc.status_code,
        exc.message,
        [ErrorDetail(field=exc.details.get("field"), message=exc.message)],
    )


def _field_path(loc: tuple | list) -> str | None:
    # "body.items.0.quantity" -> "items.0.quantity"
    parts = [str(part) for part in loc]
    if parts and parts[0] == "body":
        parts = parts[1:]
    return ".".join(parts) or None


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        ErrorDetail(
            field=_field_path(error.get("loc", ())),
            message=error.get("msg", "Invalid value"),
        )
        for error in exc.errors()
    ]
    return _error_response(422, "Validation error", errors)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail) if exc.detail else "HTTP error")


def _describe_db_error(exc: SQLAlchemyError) -> tuple[int, str]:
    """
    Map a database error to (status_code, message).

    Raw driver text is only returned when debug is on.
    """
    raw = str(getattr(exc, "orig", exc))
    lower = raw.lower()

    if isinstance(exc, IntegrityError) and ("unique" in lower or "duplicate" in lower):
        # A document number, name or SKU was taken between check and insert
        return 409, "Record with the same unique value already exists"

    if "does not exist" in lower and ("column" in lower or "relation" in lower):
        return 500, "Database schema is out of date. Run alembic upgrade head and try again."

    return 500, raw if settings.debug else "Database error"


async def sqlalchemy_db_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    status_code, message = _describe_db_error(exc)
    if status_code >= 500:
        logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error_response(status_code, message)
