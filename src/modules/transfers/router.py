"""API endpoints for Transfers."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.dependencies import CurrentUser
from src.core.database.session import get_db
from src.core.documents import DocumentKind
from src.core.documents.endpoints import NEXT_NUMBER_RESPONSES, next_number_response
from src.modules.transfers.models import Transfer
from src.modules.transfers.schemas import (
    TransferCreate,
    TransferFilters,
    TransferLineResponse,
    TransferResponse,
)
from src.modules.transfers.service import TransferService
from src.modules.warehouses.schemas import WarehouseSummary
from src.shared.schemas.base import ApiResponse, PaginatedResponse

router = APIRouter(prefix="/transfers", tags=["Transfers"])


def _transfer_to_response(transfer: Transfer) -> TransferResponse:
    return TransferResponse(
        id=transfer.id,
        transfer_number=transfer.transfer_number,
        from_warehouse_id=transfer.from_warehouse_id,
        to_warehouse_id=transfer.to_warehouse_id,
        status=transfer.status,
        notes=transfer.notes,
        created_by_id=transfer.created_by_id,
        created_at=transfer.created_at,
        updated_at=transfer.updated_at,
        validated_at=transfer.validated_at,
        from_warehouse=(
            WarehouseSummary.model_validate(transfer.from_warehouse)
            if transfer.from_warehouse
            else None
        ),
        to_warehouse=(
            WarehouseSummary.model_validate(transfer.to_warehouse) if transfer.to_warehouse else None
        ),
        items=[
            TransferLineResponse(
                id=line.id,
                product_id=line.product_id,
                product_name=line.product.name if line.product else None,
                product_sku=line.product.sku if line.product else None,
                quantity=line.quantity,
            )
            for line in transfer.lines
        ],
    )


@router.get("/next-number", responses=NEXT_NUMBER_RESPONSES)
async def get_next_transfer_number(db: AsyncSession = Depends(get_db)):
    """Next transfer number candidate: {"next": "TRF-YYYY-NNN"}."""
    return await next_number_response(db, DocumentKind.TRANSFER)


@router.post(
    "",
    response_model=ApiResponse[TransferResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_transfer(
    data: TransferCreate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Create a transfer (draft)."""
    transfer = await TransferService(db).create_transfer(data, current_user.id)
    return ApiResponse(
        success=True,
        message="Transfer created",
        data=_transfer_to_response(transfer),
    )


@router.get("", response_model=ApiResponse[PaginatedResponse[TransferResponse]])
async def list_transfers(
    current_user: CurrentUser,
    warehouse_id: int | None = Query(None),
    status: str | None = Query(None),
    search: str | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """List transfers with filters (warehouse_id matches either side)."""
    filters = TransferFilters(
        warehouse_id=warehouse_id,
        status=status,
        search=search,
        page=page,
        limit=limit,
    )
    transfers, total = await TransferService(db).list_transfers(filters)
    return ApiResponse(
        success=True,
        data=PaginatedResponse.create(
            items=[_transfer_to_response(d) for d in transfers],
            total=total,
            page=page,
            limit=limit,
        ),
    )


@router.get("/{transfer_id}", response_model=ApiResponse[TransferResponse])
async def get_transfer(
    transfer_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Get transfer by ID."""
    transfer = await TransferService(db).get_transfer_by_id(transfer_id)
    return ApiResponse(success=True, data=_transfer_to_response(transfer))


@router.post("/{transfer_id}/validate", response_model=ApiResponse[TransferResponse])
async def validate_transfer(
    transfer_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Validate a draft transfer and move its items between warehouses."""
    transfer = await TransferService(db).validate_transfer(transfer_id, current_user.id)
    return ApiResponse(
        success=True,
        message="Transfer validated",
        data=_transfer_to_response(transfer),
    )


@router.post("/{transfer_id}/cancel", response_model=ApiResponse[TransferResponse])
async def cancel_transfer(
    transfer_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Cancel a draft transfer."""
    transfer = await TransferService(db).cancel_transfer(transfer_id)
    return ApiResponse(
        success=True,
        message="Transfer cancelled",
        data=_transfer_to_response(transfer),
    )
