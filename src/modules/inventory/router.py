"""API endpoints for Products and stock."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.dependencies import CurrentUser, ManagerUser
from src.core.database.session import get_db
from src.modules.inventory.models import Product
from src.modules.inventory.schemas import (
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    StockMovementResponse,
    WarehouseStockResponse,
)
from src.modules.inventory.service import InventoryService
from src.shared.schemas.base import ApiResponse, PaginatedResponse

router = APIRouter(prefix="/products", tags=["Products"])


def _product_to_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=product.id,
        name=product.name,
        sku=product.sku,
        unit_of_measure=product.unit_of_measure,
        cost_price=product.cost_price,
        selling_price=product.selling_price,
        is_active=product.is_active,
        current_stock=product.current_stock,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


@router.post(
    "",
    response_model=ApiResponse[ProductResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    data: ProductCreate,
    current_user: ManagerUser,
    db: AsyncSession = Depends(get_db),
):
    """Create a product."""
    product = await InventoryService(db).create_product(data)
    return ApiResponse(
        success=True,
        message="Product created successfully",
        data=_product_to_response(product),
    )


@router.get("", response_model=ApiResponse[PaginatedResponse[ProductResponse]])
async def list_products(
    current_user: CurrentUser,
    search: str | None = Query(None, description="Name or SKU substring"),
    include_inactive: bool = Query(False),
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
):
    """List products with optional search."""
    products, total = await InventoryService(db).list_products(
        search=search,
        include_inactive=include_inactive,
        page=page,
        limit=limit,
    )
    return ApiResponse(
        success=True,
        data=PaginatedResponse.create(
            items=[_product_to_response(p) for p in products],
            total=total,
            page=page,
            limit=limit,
        ),
    )


@router.get("/{product_id}", response_model=ApiResponse[ProductResponse])
async def get_product(
    product_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Get product by ID, including total stock across warehouses."""
    product = await InventoryService(db).get_product_by_id(product_id)
    return ApiResponse(success=True, data=_product_to_response(product))


@router.patch("/{product_id}", response_model=ApiResponse[ProductResponse])
async def update_product(
    product_id: int,
    data: ProductUpdate,
    current_user: ManagerUser,
    db: AsyncSession = Depends(get_db),
):
    """Update a product."""
    product = await InventoryService(db).update_product(product_id, data)
    return ApiResponse(
        success=True,
        message="Product updated successfully",
        data=_product_to_response(product),
    )


@router.get("/{product_id}/stock", response_model=ApiResponse[list[WarehouseStockResponse]])
async def get_product_stock(
    product_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Stock of a product per warehouse."""
    rows = await InventoryService(db).get_product_stock(product_id)
    return ApiResponse(
        success=True,
        data=[
            WarehouseStockResponse(
                product_id=row.product_id,
                warehouse_id=row.warehouse_id,
                warehouse_name=row.warehouse.name if row.warehouse else None,
                quantity=row.quantity,
            )
            for row in rows
        ],
    )


@router.get(
    "/{product_id}/movements",
    response_model=ApiResponse[PaginatedResponse[StockMovementResponse]],
)
async def list_product_movements(
    product_id: int,
    current_user: CurrentUser,
    warehouse_id: int | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    """Stock movement history of a product."""
    service = InventoryService(db)
    await service.get_product_by_id(product_id)
    movements, total = await service.list_movements(
        product_id=product_id,
        warehouse_id=warehouse_id,
        page=page,
        limit=limit,
    )
    return ApiResponse(
        success=True,
        data=PaginatedResponse.create(
            items=[StockMovementResponse.model_validate(m) for m in movements],
            total=total,
            page=page,
            limit=limit,
        ),
    )
