"""Service for Transfers module."""

import logging
from collections import defaultdict
from datetime import datetime, timezone

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.documents import DocumentKind, DocumentNumberService, DocumentStatus
from src.core.exceptions import InsufficientStockError, NotFoundError, ValidationError
from src.modules.inventory.models import MovementType
from src.modules.inventory.service import InventoryService
from src.modules.transfers.models import Transfer, TransferLine
from src.modules.transfers.schemas import TransferCreate, TransferFilters
from src.modules.warehouses.service import WarehouseService

logger = logging.getLogger(__name__)


class TransferService:
    """Service for inter-warehouse transfers."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.inventory = InventoryService(db)
        self.warehouses = WarehouseService(db)
        self.numbers = DocumentNumberService(db)

    async def create_transfer(self, data: TransferCreate, created_by_id: int) -> Transfer:
        """Create a draft transfer between two different warehouses."""
        source = await self.warehouses.get_active_warehouse(
            data.from_warehouse_id, field="from_warehouse_id"
        )
        destination = await self.warehouses.get_active_warehouse(
            data.to_warehouse_id, field="to_warehouse_id"
        )
        if source.id == destination.id:
            raise ValidationError(
                "From and To warehouses must be different", field="to_warehouse_id"
            )
        for item in data.items:
            await self.inventory.get_product_by_id(item.product_id)

        def build(number: str) -> Transfer:
            return Transfer(
                transfer_number=number,
                from_warehouse_id=source.id,
                to_warehouse_id=destination.id,
                notes=(data.notes or "").strip() or None,
                status=DocumentStatus.DRAFT.value,
                created_by_id=created_by_id,
                lines=[
                    TransferLine(product_id=item.product_id, quantity=item.quantity)
                    for item in data.items
                ],
            )

        transfer = await self.numbers.insert_with_number(
            DocumentKind.TRANSFER, build, data.transfer_number
        )
        await self.db.commit()
        logger.info(
            "Created transfer %s: warehouse %s -> %s",
            transfer.transfer_number, source.id, destination.id,
        )
        return await self.get_transfer_by_id(transfer.id)

    async def validate_transfer(self, transfer_id: int, validated_by_id: int) -> Transfer:
        """Move the transfer lines from the source to the destination warehouse."""
        transfer = await self.get_transfer_by_id(transfer_id)
        if not transfer.is_draft:
            raise ValidationError("Only draft transfers can be validated")
        if not transfer.lines:
            raise ValidationError("Transfer has no items to move")
        await self.warehouses.get_active_warehouse(
            transfer.from_warehouse_id, field="from_warehouse_id"
        )
        await self.warehouses.get_active_warehouse(
            transfer.to_warehouse_id, field="to_warehouse_id"
        )

        required: dict[int, int] = defaultdict(int)
        for line in transfer.lines:
            required[line.product_id] += line.quantity
        for product_id, quantity in required.items():
            available = await self.inventory.get_quantity(product_id, transfer.from_warehouse_id)
            if quantity > available:
                raise InsufficientStockError(
                    product_id=product_id,
                    warehouse_id=transfer.from_warehouse_id,
                    requested=quantity,
                    available=available,
                )

        notes = f"Transfer {transfer.transfer_number}"
        for line in transfer.lines:
            await self.inventory.apply_movement(
                product_id=line.product_id,
                warehouse_id=transfer.from_warehouse_id,
                quantity_delta=-line.quantity,
                movement_type=MovementType.TRANSFER_OUT,
                created_by_id=validated_by_id,
                reference_type="transfer",
                reference_id=transfer.id,
                notes=notes,
            )
            await self.inventory.apply_movement(
                product_id=line.product_id,
                warehouse_id=transfer.to_warehouse_id,
                quantity_delta=line.quantity,
                movement_type=MovementType.TRANSFER_IN,
                created_by_id=validated_by_id,
                reference_type="transfer",
                reference_id=transfer.id,
                notes=notes,
            )

        transfer.status = DocumentStatus.DONE.value
        transfer.validated_at = datetime.now(timezone.utc)
        await self.db.commit()
        logger.info("Validated transfer %s", transfer.transfer_number)
        return await self.get_transfer_by_id(transfer.id)

    async def cancel_transfer(self, transfer_id: int) -> Transfer:
        """Cancel a draft transfer."""
        transfer = await self.get_transfer_by_id(transfer_id)
        if not transfer.is_draft:
            raise ValidationError("Only draft transfers can be cancelled")
        transfer.status = DocumentStatus.CANCELLED.value
        await self.db.commit()
        return await self.get_transfer_by_id(transfer.id)

    async def get_transfer_by_id(self, transfer_id: int) -> Transfer:
        result = await self.db.execute(
            select(Transfer)
            .execution_options(populate_existing=True)
            .where(Transfer.id == transfer_id)
            .options(
                selectinload(Transfer.lines).selectinload(TransferLine.product),
                selectinload(Transfer.from_warehouse),
                selectinload(Transfer.to_warehouse),
            )
        )
        transfer = result.scalar_one_or_none()
        if not transfer:
            raise NotFoundError("Transfer", transfer_id)
        return transfer

    async def list_transfers(self, filters: TransferFilters) -> tuple[list[Transfer], int]:
        query = (
            select(Transfer)
            .execution_options(populate_existing=True)
            .options(
                selectinload(Transfer.lines).selectinload(TransferLine.product),
                selectinload(Transfer.from_warehouse),
                selectinload(Transfer.to_warehouse),
            )
        )
        if filters.warehouse_id:
            query = query.where(
                or_(
                    Transfer.from_warehouse_id == filters.warehouse_id,
                    Transfer.to_warehouse_id == filters.warehouse_id,
                )
            )
        if filters.status:
            query = query.where(Transfer.status == filters.status)
        if filters.search and filters.search.strip():
            query = query.where(Transfer.transfer_number.ilike(f"%{filters.search.strip()}%"))

        total = await self.db.scalar(select(func.count()).select_from(query.subquery()))
        query = query.order_by(Transfer.created_at.desc(), Transfer.id.desc())
        query = query.offset((filters.page - 1) * filters.limit).limit(filters.limit)
        result = await self.db.execute(query)
        return list(result.scalars().all()), total or 0
