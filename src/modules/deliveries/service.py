"""Service for Deliveries module."""

import logging
from collections import defaultdict
from datetime import datetime, timezone

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.documents import DocumentKind, DocumentNumberService, DocumentStatus
from src.core.exceptions import InsufficientStockError, NotFoundError, ValidationError
from src.modules.deliveries.models import Delivery, DeliveryLine
from src.modules.deliveries.schemas import DeliveryCreate, DeliveryFilters
from src.modules.inventory.models import MovementType
from src.modules.inventory.service import InventoryService
from src.modules.warehouses.service import WarehouseService

logger = logging.getLogger(__name__)


class DeliveryService:
    """Service for outgoing deliveries."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.inventory = InventoryService(db)
        self.warehouses = WarehouseService(db)
        self.numbers = DocumentNumberService(db)

    async def create_delivery(self, data: DeliveryCreate, created_by_id: int) -> Delivery:
        """Create a draft delivery. Stock is only taken on validation."""
        warehouse = await self.warehouses.get_active_warehouse(data.warehouse_id)
        for item in data.items:
            await self.inventory.get_product_by_id(item.product_id)

        def build(number: str) -> Delivery:
            return Delivery(
                delivery_number=number,
                warehouse_id=warehouse.id,
                customer_name=data.customer_name,
                notes=(data.notes or "").strip() or None,
                status=DocumentStatus.DRAFT.value,
                created_by_id=created_by_id,
                lines=[
                    DeliveryLine(
                        product_id=item.product_id,
                        quantity=item.quantity,
                        unit_price=item.unit_price,
                    )
                    for item in data.items
                ],
            )

        delivery = await self.numbers.insert_with_number(
            DocumentKind.DELIVERY, build, data.delivery_number
        )
        await self.db.commit()
        logger.info("Created delivery %s for %s", delivery.delivery_number, delivery.customer_name)
        return await self.get_delivery_by_id(delivery.id)

    async def validate_delivery(self, delivery_id: int, validated_by_id: int) -> Delivery:
        """Take the delivered quantities out of the warehouse."""
        delivery = await self.get_delivery_by_id(delivery_id)
        if not delivery.is_draft:
            raise ValidationError("Only draft deliveries can be validated")
        await self.warehouses.get_active_warehouse(delivery.warehouse_id)

        # Check every line before moving anything
        required: dict[int, int] = defaultdict(int)
        for line in delivery.lines:
            required[line.product_id] += line.quantity
        for product_id, quantity in required.items():
            available = await self.inventory.get_quantity(product_id, delivery.warehouse_id)
            if quantity > available:
                raise InsufficientStockError(
                    product_id=product_id,
                    warehouse_id=delivery.warehouse_id,
                    requested=quantity,
                    available=available,
                )

        for line in delivery.lines:
            await self.inventory.apply_movement(
                product_id=line.product_id,
                warehouse_id=delivery.warehouse_id,
                quantity_delta=-line.quantity,
                movement_type=MovementType.DELIVERY,
                created_by_id=validated_by_id,
                reference_type="delivery",
                reference_id=delivery.id,
                notes=f"Delivery {delivery.delivery_number}",
            )

        delivery.status = DocumentStatus.DONE.value
        delivery.validated_at = datetime.now(timezone.utc)
        await self.db.commit()
        logger.info("Validated delivery %s", delivery.delivery_number)
        return await self.get_delivery_by_id(delivery.id)

    async def cancel_delivery(self, delivery_id: int) -> Delivery:
        """Cancel a draft delivery."""
        delivery = await self.get_delivery_by_id(delivery_id)
        if not delivery.is_draft:
            raise ValidationError("Only draft deliveries can be cancelled")
        delivery.status = DocumentStatus.CANCELLED.value
        await self.db.commit()
        return await self.get_delivery_by_id(delivery.id)

    async def get_delivery_by_id(self, delivery_id: int) -> Delivery:
        result = await self.db.execute(
            select(Delivery)
            .execution_options(populate_existing=True)
            .where(Delivery.id == delivery_id)
            .options(
                selectinload(Delivery.lines).selectinload(DeliveryLine.product),
                selectinload(Delivery.warehouse),
            )
        )
        delivery = result.scalar_one_or_none()
        if not delivery:
            raise NotFoundError("Delivery", delivery_id)
        return delivery

    async def list_deliveries(self, filters: DeliveryFilters) -> tuple[list[Delivery], int]:
        query = (
            select(Delivery)
            .execution_options(populate_existing=True)
            .options(
                selectinload(Delivery.lines).selectinload(DeliveryLine.product),
                selectinload(Delivery.warehouse),
            )
        )
        if filters.warehouse_id:
            query = query.where(Delivery.warehouse_id == filters.warehouse_id)
        if filters.status:
            query = query.where(Delivery.status == filters.status)
        if filters.search and filters.search.strip():
            s = f"%{filters.search.strip()}%"
            query = query.where(
                or_(Delivery.delivery_number.ilike(s), Delivery.customer_name.ilike(s))
            )

        total = await self.db.scalar(select(func.count()).select_from(query.subquery()))
        query = query.order_by(Delivery.created_at.desc(), Delivery.id.desc())
        query = query.offset((filters.page - 1) * filters.limit).limit(filters.limit)
        result = await self.db.execute(query)
        return list(result.scalars().all()), total or 0
