"""Service for Warehouses module."""

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import DuplicateError, NotFoundError, ValidationError
from src.modules.warehouses.models import Warehouse
from src.modules.warehouses.schemas import WarehouseCreate, WarehouseUpdate


class WarehouseService:
    """Service for managing warehouses."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_warehouse(self, data: WarehouseCreate) -> Warehouse:
        await self._check_unique(name=data.name, code=data.code)
        warehouse = Warehouse(
            name=data.name,
            code=data.code,
            location=data.location,
            is_active=True,
        )
        self.db.add(warehouse)
        await self.db.commit()
        await self.db.refresh(warehouse)
        return warehouse

    async def get_warehouse_by_id(self, warehouse_id: int) -> Warehouse:
        result = await self.db.execute(select(Warehouse).where(Warehouse.id == warehouse_id))
        warehouse = result.scalar_one_or_none()
        if not warehouse:
            raise NotFoundError("Warehouse", warehouse_id)
        return warehouse

    async def get_active_warehouse(self, warehouse_id: int, field: str = "warehouse_id") -> Warehouse:
        """Warehouse that documents may move stock in/out of."""
        warehouse = await self.get_warehouse_by_id(warehouse_id)
        if not warehouse.is_active:
            raise ValidationError(f"Warehouse '{warehouse.name}' is inactive", field=field)
        return warehouse

    async def list_warehouses(
        self,
        search: str | None = None,
        include_inactive: bool = False,
        page: int = 1,
        limit: int = 100,
    ) -> tuple[list[Warehouse], int]:
        query = select(Warehouse)
        if not include_inactive:
            query = query.where(Warehouse.is_active.is_(True))
        if search and search.strip():
            s = f"%{search.strip()}%"
            query = query.where(or_(Warehouse.name.ilike(s), Warehouse.code.ilike(s)))

        total = await self.db.scalar(select(func.count()).select_from(query.subquery()))
        query = query.order_by(Warehouse.name)
        query = query.offset((page - 1) * limit).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all()), total or 0

    async def update_warehouse(self, warehouse_id: int, data: WarehouseUpdate) -> Warehouse:
        warehouse = await self.get_warehouse_by_id(warehouse_id)
        updates = data.model_dump(exclude_unset=True)

        if "name" in updates and updates["name"] != warehouse.name:
            await self._check_unique(name=updates["name"])
        if updates.get("code") and updates["code"] != warehouse.code:
            await self._check_unique(code=updates["code"])

        for field, value in updates.items():
            setattr(warehouse, field, value)

        await self.db.commit()
        await self.db.refresh(warehouse)
        return warehouse

    async def _check_unique(self, name: str | None = None, code: str | None = None) -> None:
        if name:
            existing = await self.db.scalar(select(Warehouse.id).where(Warehouse.name == name))
            if existing:
                raise DuplicateError("Warehouse", "name", name)
        if code:
            existing = await self.db.scalar(select(Warehouse.id).where(Warehouse.code == code))
            if existing:
                raise DuplicateError("Warehouse", "code", code)
