"""API endpoints for Deliveries."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.dependencies import CurrentUser
from src.core.database.session import get_db
from src.core.documents import DocumentKind
from src.core.documents.endpoints import NEXT_NUMBER_RESPONSES, next_number_response
from src.modules.deliveries.models import Delivery
from src.modules.deliveries.schemas import (
    DeliveryCreate,
    DeliveryFilters,
    DeliveryLineResponse,
    DeliveryResponse,
)
from src.modules.deliveries.service import DeliveryService
from src.modules.warehouses.schemas import WarehouseSummary
from src.shared.schemas.base import ApiResponse, PaginatedResponse

router = APIRouter(prefix="/deliveries", tags=["Deliveries"])


def _delivery_to_response(delivery: Delivery) -> DeliveryResponse:
    return DeliveryResponse(
        id=delivery.id,
        delivery_number=delivery.delivery_number,
        warehouse_id=delivery.warehouse_id,
        customer_name=delivery.customer_name,
        status=delivery.status,
        notes=delivery.notes,
        created_by_id=delivery.created_by_id,
        created_at=delivery.created_at,
        updated_at=delivery.updated_at,
        validated_at=delivery.validated_at,
        warehouse=WarehouseSummary.model_validate(delivery.warehouse) if delivery.warehouse else None,
        items=[
            DeliveryLineResponse(
                id=line.id,
                product_id=line.product_id,
                product_name=line.product.name if line.product else None,
                product_sku=line.product.sku if line.product else None,
                quantity=line.quantity,
                unit_price=line.unit_price,
            )
            for line in delivery.lines
        ],
    )


@router.get("/next-number", responses=NEXT_NUMBER_RESPONSES)
async def get_next_delivery_number(db: AsyncSession = Depends(get_db)):
    """Next delivery number candidate: {"next": "DEL-YYYY-NNN"}."""
    return await next_number_response(db, DocumentKind.DELIVERY)


@router.post(
    "",
    response_model=ApiResponse[DeliveryResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_delivery(
    data: DeliveryCreate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Create a delivery (draft)."""
    delivery = await DeliveryService(db).create_delivery(data, current_user.id)
    return ApiResponse(
        success=True,
        message="Delivery created",
        data=_delivery_to_response(delivery),
    )


@router.get("", response_model=ApiResponse[PaginatedResponse[DeliveryResponse]])
async def list_deliveries(
    current_user: CurrentUser,
    warehouse_id: int | None = Query(None),
    status: str | None = Query(None),
    search: str | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """List deliveries with filters."""
    filters = DeliveryFilters(
        warehouse_id=warehouse_id,
        status=status,
        search=search,
        page=page,
        limit=limit,
    )
    deliveries, total = await DeliveryService(db).list_deliveries(filters)
    return ApiResponse(
        success=True,
        data=PaginatedResponse.create(
            items=[_delivery_to_response(d) for d in deliveries],
            total=total,
            page=page,
            limit=limit,
        ),
    )


@router.get("/{delivery_id}", response_model=ApiResponse[DeliveryResponse])
async def get_delivery(
    delivery_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Get delivery by ID."""
    delivery = await DeliveryService(db).get_delivery_by_id(delivery_id)
    return ApiResponse(success=True, data=_delivery_to_response(delivery))


@router.post("/{delivery_id}/validate", response_model=ApiResponse[DeliveryResponse])
async def validate_delivery(
    delivery_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Validate a draft delivery and take its items out of stock."""
    delivery = await DeliveryService(db).validate_delivery(delivery_id, current_user.id)
    return ApiResponse(
        success=True,
        message="Delivery validated",
        data=_delivery_to_response(delivery),
    )


@router.post("/{delivery_id}/cancel", response_model=ApiResponse[DeliveryResponse])
async def cancel_delivery(
    delivery_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Cancel a draft delivery."""
    delivery = await DeliveryService(db).cancel_delivery(delivery_id)
    return ApiResponse(
        success=True,
        message="Delivery cancelled",
        data=_delivery_to_response(delivery),
    )
