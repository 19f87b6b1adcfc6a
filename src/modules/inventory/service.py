"""Service for Inventory module."""

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.exceptions import (
    DuplicateError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from src.modules.inventory.models import MovementType, Product, ProductStock, StockMovement
from src.modules.inventory.schemas import ProductCreate, ProductUpdate
from src.modules.warehouses.models import Warehouse

logger = logging.getLogger(__name__)


class InventoryService:
    """Service for managing products, per-warehouse stock and movements."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # --- Products ---

    async def create_product(self, data: ProductCreate, commit: bool = True) -> Product:
        """Create a product. With commit=False the product is only flushed."""
        if data.sku:
            existing = await self.db.scalar(select(Product.id).where(Product.sku == data.sku))
            if existing:
                raise DuplicateError("Product", "sku", data.sku)

        product = Product(
            name=data.name,
            sku=data.sku,
            unit_of_measure=data.unit_of_measure,
            cost_price=data.cost_price,
            selling_price=data.selling_price,
            is_active=True,
        )
        self.db.add(product)
        await self.db.flush()
        logger.info("Created product %s (sku=%s)", product.id, product.sku)

        if commit:
            await self.db.commit()
        return await self.get_product_by_id(product.id)

    async def get_product_by_id(self, product_id: int) -> Product:
        result = await self.db.execute(
            select(Product)
            .options(selectinload(Product.stock_levels))
            .where(Product.id == product_id)
            .execution_options(populate_existing=True)
        )
        product = result.scalar_one_or_none()
        if not product:
            raise NotFoundError("Product", product_id)
        return product

    async def list_products(
        self,
        search: str | None = None,
        include_inactive: bool = False,
        page: int = 1,
        limit: int = 100,
    ) -> tuple[list[Product], int]:
        """List products; search matches name or SKU case-insensitively."""
        query = select(Product).options(selectinload(Product.stock_levels)).execution_options(
            populate_existing=True
        )
        if not include_inactive:
            query = query.where(Product.is_active.is_(True))
        if search and search.strip():
            s = f"%{search.strip()}%"
            query = query.where(or_(Product.name.ilike(s), Product.sku.ilike(s)))

        total = await self.db.scalar(select(func.count()).select_from(query.subquery()))
        query = query.order_by(Product.name)
        query = query.offset((page - 1) * limit).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all()), total or 0

    async def update_product(self, product_id: int, data: ProductUpdate) -> Product:
        product = await self.get_product_by_id(product_id)
        updates = data.model_dump(exclude_unset=True)

        if updates.get("sku") and updates["sku"] != product.sku:
            existing = await self.db.scalar(select(Product.id).where(Product.sku == updates["sku"]))
            if existing:
                raise DuplicateError("Product", "sku", updates["sku"])

        for field, value in updates.items():
            setattr(product, field, value)

        await self.db.commit()
        return await self.get_product_by_id(product.id)

    # --- Stock ---

    async def get_product_stock(self, product_id: int) -> list[ProductStock]:
        """Stock rows of a product, one per warehouse it has ever been held in."""
        await self.get_product_by_id(product_id)
        result = await self.db.execute(
            select(ProductStock)
            .execution_options(populate_existing=True)
            .options(selectinload(ProductStock.warehouse))
            .where(ProductStock.product_id == product_id)
            .order_by(ProductStock.warehouse_id)
        )
        return list(result.scalars().all())

    async def get_quantity(self, product_id: int, warehouse_id: int) -> int:
        quantity = await self.db.scalar(
            select(ProductStock.quantity).where(
                ProductStock.product_id == product_id,
                ProductStock.warehouse_id == warehouse_id,
            )
        )
        return quantity or 0

    async def _get_or_create_stock(self, product_id: int, warehouse_id: int) -> ProductStock:
        result = await self.db.execute(
            select(ProductStock).where(
                ProductStock.product_id == product_id,
                ProductStock.warehouse_id == warehouse_id,
            )
        )
        stock = result.scalar_one_or_none()

        if not stock:
            warehouse = await self.db.get(Warehouse, warehouse_id)
            if not warehouse:
                raise NotFoundError("Warehouse", warehouse_id)
            await self.get_product_by_id(product_id)

            stock = ProductStock(product_id=product_id, warehouse_id=warehouse_id, quantity=0)
            self.db.add(stock)
            await self.db.flush()

        return stock

    async def apply_movement(
        self,
        *,
        product_id: int,
        warehouse_id: int,
        quantity_delta: int,
        movement_type: MovementType,
        created_by_id: int,
        reference_type: str | None = None,
        reference_id: int | None = None,
        notes: str | None = None,
    ) -> StockMovement:
        """
        Change the stock of a product in a warehouse and record the movement.

        Does not commit; callers commit together with their document.

        Raises:
            InsufficientStockError: if the result would be negative
        """
        if quantity_delta == 0:
            raise ValidationError("Stock movement quantity must be non-zero")

        stock = await self._get_or_create_stock(product_id, warehouse_id)
        quantity_before = stock.quantity
        quantity_after = quantity_before + quantity_delta
        if quantity_after < 0:
            raise InsufficientStockError(
                product_id=product_id,
                warehouse_id=warehouse_id,
                requested=-quantity_delta,
                available=quantity_before,
            )

        stock.quantity = quantity_after
        movement = StockMovement(
            product_id=product_id,
            warehouse_id=warehouse_id,
            movement_type=movement_type.value,
            quantity=quantity_delta,
            quantity_before=quantity_before,
            quantity_after=quantity_after,
            reference_type=reference_type,
            reference_id=reference_id,
            notes=notes,
            created_by_id=created_by_id,
        )
        self.db.add(movement)
        await self.db.flush()

        logger.debug(
            "Stock %s product=%s warehouse=%s %+d (%d -> %d)",
            movement_type.value, product_id, warehouse_id,
            quantity_delta, quantity_before, quantity_after,
        )
        return movement

    async def list_movements(
        self,
        product_id: int | None = None,
        warehouse_id: int | None = None,
        reference_type: str | None = None,
        reference_id: int | None = None,
        page: int = 1,
        limit: int = 100,
    ) -> tuple[list[StockMovement], int]:
        query = select(StockMovement)
        if product_id is not None:
            query = query.where(StockMovement.product_id == product_id)
        if warehouse_id is not None:
            query = query.where(StockMovement.warehouse_id == warehouse_id)
        if reference_type is not None:
            query = query.where(StockMovement.reference_type == reference_type)
        if reference_id is not None:
            query = query.where(StockMovement.reference_id == reference_id)

        total = await self.db.scalar(select(func.count()).select_from(query.subquery()))
        query = query.order_by(StockMovement.created_at.desc(), StockMovement.id.desc())
        query = query.offset((page - 1) * limit).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all()), total or 0
