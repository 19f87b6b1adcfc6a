"""Service for Receipts module."""

import logging
from datetime import datetime, timezone

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.documents import DocumentKind, DocumentNumberService, DocumentStatus
from src.core.exceptions import NotFoundError, ValidationError
from src.modules.inventory.models import MovementType
from src.modules.inventory.service import InventoryService
from src.modules.receipts.models import Receipt, ReceiptLine
from src.modules.receipts.schemas import ReceiptCreate, ReceiptFilters
from src.modules.warehouses.service import WarehouseService

logger = logging.getLogger(__name__)


class ReceiptService:
    """Service for incoming goods receipts."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.inventory = InventoryService(db)
        self.warehouses = WarehouseService(db)
        self.numbers = DocumentNumberService(db)

    async def create_receipt(self, data: ReceiptCreate, created_by_id: int) -> Receipt:
        """Create a draft receipt."""
        warehouse = await self.warehouses.get_active_warehouse(data.warehouse_id)
        for item in data.items:
            await self.inventory.get_product_by_id(item.product_id)

        def build(number: str) -> Receipt:
            return Receipt(
                receipt_number=number,
                warehouse_id=warehouse.id,
                supplier_name=data.supplier_name,
                notes=(data.notes or "").strip() or None,
                status=DocumentStatus.DRAFT.value,
                created_by_id=created_by_id,
                lines=[
                    ReceiptLine(
                        product_id=item.product_id,
                        quantity=item.quantity,
                        unit_price=item.unit_price,
                    )
                    for item in data.items
                ],
            )

        receipt = await self.numbers.insert_with_number(
            DocumentKind.RECEIPT, build, data.receipt_number
        )
        await self.db.commit()
        logger.info("Created receipt %s from %s", receipt.receipt_number, receipt.supplier_name)
        return await self.get_receipt_by_id(receipt.id)

    async def validate_receipt(self, receipt_id: int, validated_by_id: int) -> Receipt:
        """Put the received quantities into the warehouse."""
        receipt = await self.get_receipt_by_id(receipt_id)
        if not receipt.is_draft:
            raise ValidationError("Only draft receipts can be validated")
        await self.warehouses.get_active_warehouse(receipt.warehouse_id)

        for line in receipt.lines:
            await self.inventory.apply_movement(
                product_id=line.product_id,
                warehouse_id=receipt.warehouse_id,
                quantity_delta=line.quantity,
                movement_type=MovementType.RECEIPT,
                created_by_id=validated_by_id,
                reference_type="receipt",
                reference_id=receipt.id,
                notes=f"Receipt {receipt.receipt_number}",
            )

        receipt.status = DocumentStatus.DONE.value
        receipt.validated_at = datetime.now(timezone.utc)
        await self.db.commit()
        logger.info("Validated receipt %s", receipt.receipt_number)
        return await self.get_receipt_by_id(receipt.id)

    async def cancel_receipt(self, receipt_id: int) -> Receipt:
        """Cancel a draft receipt."""
        receipt = await self.get_receipt_by_id(receipt_id)
        if not receipt.is_draft:
            raise ValidationError("Only draft receipts can be cancelled")
        receipt.status = DocumentStatus.CANCELLED.value
        await self.db.commit()
        return await self.get_receipt_by_id(receipt.id)

    async def get_receipt_by_id(self, receipt_id: int) -> Receipt:
        result = await self.db.execute(
            select(Receipt)
            .execution_options(populate_existing=True)
            .where(Receipt.id == receipt_id)
            .options(
                selectinload(Receipt.lines).selectinload(ReceiptLine.product),
                selectinload(Receipt.warehouse),
            )
        )
        receipt = result.scalar_one_or_none()
        if not receipt:
            raise NotFoundError("Receipt", receipt_id)
        return receipt

    async def list_receipts(self, filters: ReceiptFilters) -> tuple[list[Receipt], int]:
        query = (
            select(Receipt)
            .execution_options(populate_existing=True)
            .options(
                selectinload(Receipt.lines).selectinload(ReceiptLine.product),
                selectinload(Receipt.warehouse),
            )
        )
        if filters.warehouse_id:
            query = query.where(Receipt.warehouse_id == filters.warehouse_id)
        if filters.status:
            query = query.where(Receipt.status == filters.status)
        if filters.search and filters.search.strip():
            s = f"%{filters.search.strip()}%"
            query = query.where(or_(Receipt.receipt_number.ilike(s), Receipt.supplier_name.ilike(s)))

        total = await self.db.scalar(select(func.count()).select_from(query.subquery()))
        query = query.order_by(Receipt.created_at.desc(), Receipt.id.desc())
        query = query.offset((filters.page - 1) * filters.limit).limit(filters.limit)
        result = await self.db.execute(query)
        return list(result.scalars().all()), total or 0
