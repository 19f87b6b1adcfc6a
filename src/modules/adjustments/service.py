"""Service for Adjustments module."""

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.documents import DocumentKind, DocumentNumberService, DocumentStatus
from src.core.exceptions import NotFoundError, ValidationError
from src.modules.adjustments.models import Adjustment
from src.modules.adjustments.schemas import AdjustmentCreate, AdjustmentFilters
from src.modules.inventory.models import MovementType
from src.modules.inventory.schemas import ProductCreate
from src.modules.inventory.service import InventoryService
from src.modules.warehouses.service import WarehouseService

logger = logging.getLogger(__name__)


class AdjustmentService:
    """Service for stock adjustments."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.inventory = InventoryService(db)
        self.warehouses = WarehouseService(db)
        self.numbers = DocumentNumberService(db)

    async def create_adjustment(self, data: AdjustmentCreate, created_by_id: int) -> Adjustment:
        """
        Create an adjustment and apply it to stock immediately.

        system_quantity is the warehouse stock at creation time and
        counted_quantity the stock after applying increase_by/decrease_by.
        """
        warehouse = await self.warehouses.get_active_warehouse(data.warehouse_id)

        difference = data.increase_by - data.decrease_by
        if difference == 0:
            raise ValidationError("Adjustment does not change stock", field="increase_by")

        if data.product_id is not None:
            product = await self.inventory.get_product_by_id(data.product_id)
        else:
            product = await self.inventory.create_product(
                ProductCreate(name=data.new_product_name.strip()), commit=False
            )

        system_quantity = await self.inventory.get_quantity(product.id, warehouse.id)
        counted_quantity = system_quantity + difference
        if counted_quantity < 0:
            raise ValidationError(
                f"Cannot decrease by {data.decrease_by}: only {system_quantity} in stock",
                field="decrease_by",
            )

        now = datetime.now(timezone.utc)

        def build(number: str) -> Adjustment:
            return Adjustment(
                adjustment_number=number,
                warehouse_id=warehouse.id,
                product_id=product.id,
                system_quantity=system_quantity,
                counted_quantity=counted_quantity,
                difference=difference,
                notes=(data.notes or "").strip() or None,
                status=DocumentStatus.DONE.value,
                created_by_id=created_by_id,
                validated_at=now,
            )

        adjustment = await self.numbers.insert_with_number(
            DocumentKind.ADJUSTMENT, build, data.adjustment_number
        )

        await self.inventory.apply_movement(
            product_id=product.id,
            warehouse_id=warehouse.id,
            quantity_delta=difference,
            movement_type=MovementType.ADJUSTMENT,
            created_by_id=created_by_id,
            reference_type="adjustment",
            reference_id=adjustment.id,
            notes=f"Adjustment {adjustment.adjustment_number}",
        )

        await self.db.commit()
        logger.info(
            "Adjustment %s: product %s in warehouse %s %+d",
            adjustment.adjustment_number, product.id, warehouse.id, difference,
        )
        return await self.get_adjustment_by_id(adjustment.id)

    async def get_adjustment_by_id(self, adjustment_id: int) -> Adjustment:
        result = await self.db.execute(
            select(Adjustment)
            .execution_options(populate_existing=True)
            .where(Adjustment.id == adjustment_id)
            .options(selectinload(Adjustment.product), selectinload(Adjustment.warehouse))
        )
        adjustment = result.scalar_one_or_none()
        if not adjustment:
            raise NotFoundError("Adjustment", adjustment_id)
        return adjustment

    async def list_adjustments(
        self, filters: AdjustmentFilters
    ) -> tuple[list[Adjustment], int]:
        query = (
            select(Adjustment)
            .execution_options(populate_existing=True)
            .options(
                selectinload(Adjustment.product), selectinload(Adjustment.warehouse)
            )
        )
        if filters.warehouse_id:
            query = query.where(Adjustment.warehouse_id == filters.warehouse_id)
        if filters.product_id:
            query = query.where(Adjustment.product_id == filters.product_id)
        if filters.status:
            query = query.where(Adjustment.status == filters.status)
        if filters.search and filters.search.strip():
            query = query.where(Adjustment.adjustment_number.ilike(f"%{filters.search.strip()}%"))

        total = await self.db.scalar(select(func.count()).select_from(query.subquery()))
        query = query.order_by(Adjustment.created_at.desc(), Adjustment.id.desc())
        query = query.offset((filters.page - 1) * filters.limit).limit(filters.limit)
        result = await self.db.execute(query)
        return list(result.scalars().all()), total or 0
