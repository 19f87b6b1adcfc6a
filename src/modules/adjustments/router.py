"""API endpoints for stock Adjustments."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.dependencies import CurrentUser
from src.core.database.session import get_db
from src.core.documents import DocumentKind
from src.core.documents.endpoints import NEXT_NUMBER_RESPONSES, next_number_response
from src.modules.adjustments.models import Adjustment
from src.modules.adjustments.schemas import (
    AdjustmentCreate,
    AdjustmentFilters,
    AdjustmentResponse,
)
from src.modules.adjustments.service import AdjustmentService
from src.modules.inventory.schemas import ProductSummary
from src.modules.warehouses.schemas import WarehouseSummary
from src.shared.schemas.base import ApiResponse, PaginatedResponse

router = APIRouter(prefix="/adjustments", tags=["Adjustments"])


def _adjustment_to_response(adjustment: Adjustment) -> AdjustmentResponse:
    return AdjustmentResponse(
        id=adjustment.id,
        adjustment_number=adjustment.adjustment_number,
        warehouse_id=adjustment.warehouse_id,
        product_id=adjustment.product_id,
        system_quantity=adjustment.system_quantity,
        counted_quantity=adjustment.counted_quantity,
        difference=adjustment.difference,
        reason=adjustment.reason,
        status=adjustment.status,
        created_by_id=adjustment.created_by_id,
        created_at=adjustment.created_at,
        updated_at=adjustment.updated_at,
        validated_at=adjustment.validated_at,
        product=ProductSummary.model_validate(adjustment.product) if adjustment.product else None,
        warehouse=(
            WarehouseSummary.model_validate(adjustment.warehouse) if adjustment.warehouse else None
        ),
    )


@router.get("/next-number", responses=NEXT_NUMBER_RESPONSES)
async def get_next_adjustment_number(db: AsyncSession = Depends(get_db)):
    """Next adjustment number candidate: {"next": "ADJ-YYYY-NNN"}."""
    return await next_number_response(db, DocumentKind.ADJUSTMENT)


@router.post(
    "",
    response_model=ApiResponse[AdjustmentResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_adjustment(
    data: AdjustmentCreate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Create an adjustment and apply it to stock."""
    adjustment = await AdjustmentService(db).create_adjustment(data, current_user.id)
    return ApiResponse(
        success=True,
        message="Adjustment created",
        data=_adjustment_to_response(adjustment),
    )


@router.get("", response_model=ApiResponse[PaginatedResponse[AdjustmentResponse]])
async def list_adjustments(
    current_user: CurrentUser,
    warehouse_id: int | None = Query(None),
    product_id: int | None = Query(None),
    status: str | None = Query(None),
    search: str | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """List adjustments with filters."""
    filters = AdjustmentFilters(
        warehouse_id=warehouse_id,
        product_id=product_id,
        status=status,
        search=search,
        page=page,
        limit=limit,
    )
    adjustments, total = await AdjustmentService(db).list_adjustments(filters)
    return ApiResponse(
        success=True,
        data=PaginatedResponse.create(
            items=[_adjustment_to_response(a) for a in adjustments],
            total=total,
            page=page,
            limit=limit,
        ),
    )


@router.get("/{adjustment_id}", response_model=ApiResponse[AdjustmentResponse])
async def get_adjustment(
    adjustment_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Get adjustment by ID."""
    adjustment = await AdjustmentService(db).get_adjustment_by_id(adjustment_id)
    return ApiResponse(success=True, data=_adjustment_to_response(adjustment))
