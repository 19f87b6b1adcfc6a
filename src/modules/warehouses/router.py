"""API endpoints for Warehouses."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.dependencies import CurrentUser, ManagerUser
from src.core.database.session import get_db
from src.modules.warehouses.schemas import WarehouseCreate, WarehouseResponse, WarehouseUpdate
from src.modules.warehouses.service import WarehouseService
from src.shared.schemas.base import ApiResponse, PaginatedResponse

router = APIRouter(prefix="/warehouses", tags=["Warehouses"])


@router.post(
    "",
    response_model=ApiResponse[WarehouseResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_warehouse(
    data: WarehouseCreate,
    current_user: ManagerUser,
    db: AsyncSession = Depends(get_db),
):
    """Create a warehouse."""
    warehouse = await WarehouseService(db).create_warehouse(data)
    return ApiResponse(
        success=True,
        message="Warehouse created successfully",
        data=WarehouseResponse.model_validate(warehouse),
    )


@router.get("", response_model=ApiResponse[PaginatedResponse[WarehouseResponse]])
async def list_warehouses(
    current_user: CurrentUser,
    search: str | None = Query(None),
    include_inactive: bool = Query(False),
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
):
    """List warehouses."""
    warehouses, total = await WarehouseService(db).list_warehouses(
        search=search,
        include_inactive=include_inactive,
        page=page,
        limit=limit,
    )
    return ApiResponse(
        success=True,
        data=PaginatedResponse.create(
            items=[WarehouseResponse.model_validate(w) for w in warehouses],
            total=total,
            page=page,
            limit=limit,
        ),
    )


@router.get("/{warehouse_id}", response_model=ApiResponse[WarehouseResponse])
async def get_warehouse(
    warehouse_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Get warehouse by ID."""
    warehouse = await WarehouseService(db).get_warehouse_by_id(warehouse_id)
    return ApiResponse(success=True, data=WarehouseResponse.model_validate(warehouse))


@router.patch("/{warehouse_id}", response_model=ApiResponse[WarehouseResponse])
async def update_warehouse(
    warehouse_id: int,
    data: WarehouseUpdate,
    current_user: ManagerUser,
    db: AsyncSession = Depends(get_db),
):
    """Update a warehouse."""
    warehouse = await WarehouseService(db).update_warehouse(warehouse_id, data)
    return ApiResponse(
        success=True,
        message="Warehouse updated successfully",
        data=WarehouseResponse.model_validate(warehouse),
    )
