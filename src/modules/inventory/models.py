"""Inventory models: products and per-warehouse stock."""

from datetime import datetime
from decimal import Decimal
from enum import StrEnum

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.core.database.base import Base, BaseModel, BigIntPK


class MovementType(StrEnum):
    """Stock movement type enumeration."""

    ADJUSTMENT = "adjustment"  # Inventory count correction
    DELIVERY = "delivery"  # Outgoing stock to a customer
    RECEIPT = "receipt"  # Incoming stock from a supplier
    TRANSFER_OUT = "transfer_out"  # Leaves the source warehouse of a transfer
    TRANSFER_IN = "transfer_in"  # Arrives at the destination warehouse of a transfer


class Product(BaseModel):
    """Stockable product."""

    __tablename__ = "products"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    sku: Mapped[str | None] = mapped_column(String(100), nullable=True, unique=True, index=True)
    unit_of_measure: Mapped[str] = mapped_column(String(20), nullable=False, default="unit")
    cost_price: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), nullable=False, default=Decimal("0.00")
    )
    selling_price: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), nullable=False, default=Decimal("0.00")
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Relationships
    stock_levels: Mapped[list["ProductStock"]] = relationship(
        "ProductStock", back_populates="product"
    )

    @property
    def current_stock(self) -> int:
        """Quantity on hand across all warehouses (stock_levels must be loaded)."""
        return sum(level.quantity for level in self.stock_levels)


class ProductStock(Base):
    """Quantity of a product held in one warehouse."""

    __tablename__ = "product_stock"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("products.id"), nullable=False, index=True
    )
    warehouse_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("warehouses.id"), nullable=False, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("product_id", "warehouse_id", name="uq_product_stock_product_warehouse"),
        CheckConstraint("quantity >= 0", name="ck_product_stock_quantity_non_negative"),
    )

    # Relationships
    product: Mapped["Product"] = relationship("Product", back_populates="stock_levels")
    warehouse: Mapped["Warehouse"] = relationship("Warehouse")


class StockMovement(Base):
    """Append-only ledger of stock changes."""

    __tablename__ = "stock_movements"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("products.id"), nullable=False, index=True
    )
    warehouse_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("warehouses.id"), nullable=False, index=True
    )
    movement_type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(
        Integer, nullable=False
    )  # Positive for in, negative for out
    quantity_before: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity_after: Mapped[int] = mapped_column(Integer, nullable=False)
    reference_type: Mapped[str | None] = mapped_column(
        String(50), nullable=True
    )  # "adjustment", "delivery", "receipt", "transfer"
    reference_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )


# Import at the end to avoid circular imports
from src.modules.warehouses.models import Warehouse
