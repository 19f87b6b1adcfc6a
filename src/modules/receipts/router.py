"""API endpoints for goods Receipts."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.dependencies import CurrentUser
from src.core.database.session import get_db
from src.core.documents import DocumentKind
from src.core.documents.endpoints import NEXT_NUMBER_RESPONSES, next_number_response
from src.modules.receipts.models import Receipt
from src.modules.receipts.schemas import (
    ReceiptCreate,
    ReceiptFilters,
    ReceiptLineResponse,
    ReceiptResponse,
)
from src.modules.receipts.service import ReceiptService
from src.modules.warehouses.schemas import WarehouseSummary
from src.shared.schemas.base import ApiResponse, PaginatedResponse

router = APIRouter(prefix="/receipts", tags=["Receipts"])


def _receipt_to_response(receipt: Receipt) -> ReceiptResponse:
    return ReceiptResponse(
        id=receipt.id,
        receipt_number=receipt.receipt_number,
        warehouse_id=receipt.warehouse_id,
        supplier_name=receipt.supplier_name,
        status=receipt.status,
        notes=receipt.notes,
        created_by_id=receipt.created_by_id,
        created_at=receipt.created_at,
        updated_at=receipt.updated_at,
        validated_at=receipt.validated_at,
        total_quantity=receipt.total_quantity,
        total_amount=receipt.total_amount,
        warehouse=WarehouseSummary.model_validate(receipt.warehouse) if receipt.warehouse else None,
        items=[
            ReceiptLineResponse(
                id=line.id,
                receipt_id=line.receipt_id,
                product_id=line.product_id,
                product_name=line.product.name if line.product else None,
                product_sku=line.product.sku if line.product else None,
                quantity=line.quantity,
                unit_price=line.unit_price,
                line_total=line.line_total,
            )
            for line in receipt.lines
        ],
    )


@router.get("/next-number", responses=NEXT_NUMBER_RESPONSES)
async def get_next_receipt_number(db: AsyncSession = Depends(get_db)):
    """Next receipt number candidate: {"next": "REC-YYYY-NNN"}."""
    return await next_number_response(db, DocumentKind.RECEIPT)


@router.post(
    "",
    response_model=ApiResponse[ReceiptResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_receipt(
    data: ReceiptCreate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Create a receipt (draft)."""
    receipt = await ReceiptService(db).create_receipt(data, current_user.id)
    return ApiResponse(
        success=True,
        message="Receipt created",
        data=_receipt_to_response(receipt),
    )


@router.get("", response_model=ApiResponse[PaginatedResponse[ReceiptResponse]])
async def list_receipts(
    current_user: CurrentUser,
    warehouse_id: int | None = Query(None),
    status: str | None = Query(None),
    search: str | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """List receipts with filters."""
    filters = ReceiptFilters(
        warehouse_id=warehouse_id,
        status=status,
        search=search,
        page=page,
        limit=limit,
    )
    receipts, total = await ReceiptService(db).list_receipts(filters)
    return ApiResponse(
        success=True,
        data=PaginatedResponse.create(
            items=[_receipt_to_response(r) for r in receipts],
            total=total,
            page=page,
            limit=limit,
        ),
    )


@router.get("/{receipt_id}", response_model=ApiResponse[ReceiptResponse])
async def get_receipt(
    receipt_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Get receipt by ID."""
    receipt = await ReceiptService(db).get_receipt_by_id(receipt_id)
    return ApiResponse(success=True, data=_receipt_to_response(receipt))


@router.post("/{receipt_id}/validate", response_model=ApiResponse[ReceiptResponse])
async def validate_receipt(
    receipt_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Validate a draft receipt and add its items to stock."""
    receipt = await ReceiptService(db).validate_receipt(receipt_id, current_user.id)
    return ApiResponse(
        success=True,
        message="Receipt validated",
        data=_receipt_to_response(receipt),
    )


@router.post("/{receipt_id}/cancel", response_model=ApiResponse[ReceiptResponse])
async def cancel_receipt(
    receipt_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Cancel a draft receipt."""
    receipt = await ReceiptService(db).cancel_receipt(receipt_id)
    return ApiResponse(
        success=True,
        message="Receipt cancelled",
        data=_receipt_to_response(receipt),
    )
