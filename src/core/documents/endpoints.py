"""Shared handler for the per-kind ``GET /api/<kind>/next-number`` endpoints."""

import logging

from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.documents.kinds import DocumentKind
from src.core.documents.service import DocumentNumberService
from src.shared.schemas import NextNumberError, NextNumberResponse

logger = logging.getLogger(__name__)

# OpenAPI description of the bare bodies returned below
NEXT_NUMBER_RESPONSES = {
    200: {"model": NextNumberResponse},
    500: {"model": NextNumberError},
}


async def next_number_response(db: AsyncSession, kind: DocumentKind) -> JSONResponse:
    """
    Respond with ``{"next": <number>}``.

    The body is not wrapped in ApiResponse. Any failure maps to a 500 with
    ``{"error": "Failed to compute next <kind> number"}``.
    """
    try:
        number = await DocumentNumberService(db).next_number(kind)
    except Exception:
        logger.exception("Error generating next %s number", kind.value)
        return JSONResponse(
            status_code=500,
            content=NextNumberError(
                error=f"Failed to compute next {kind.value} number"
            ).model_dump(),
        )
    return JSONResponse(status_code=200, content=NextNumberResponse(next=number).model_dump())
