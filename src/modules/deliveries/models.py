"""Delivery documents (DEL-YYYY-NNN): stock leaving a warehouse to a customer."""

from decimal import Decimal

from sqlalchemy import BigInteger, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.core.database.base import Base, BaseModel, BigIntPK
from src.core.documents import DocumentKind, DocumentMixin, register_number_column


class Delivery(DocumentMixin, BaseModel):
    """Outgoing delivery order."""

    __tablename__ = "deliveries"

    delivery_number: Mapped[str] = mapped_column(
        String(50), nullable=False, unique=True, index=True
    )
    warehouse_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("warehouses.id"), nullable=False, index=True
    )
    customer_name: Mapped[str] = mapped_column(String(200), nullable=False)

    # Relationships
    warehouse: Mapped["Warehouse"] = relationship("Warehouse")
    lines: Mapped[list["DeliveryLine"]] = relationship(
        "DeliveryLine",
        back_populates="delivery",
        cascade="all, delete-orphan",
        order_by="DeliveryLine.id",
    )


class DeliveryLine(Base):
    """Product and quantity on a delivery."""

    __tablename__ = "delivery_lines"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    delivery_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("deliveries.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("products.id"), nullable=False, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal | None] = mapped_column(Numeric(15, 2), nullable=True)

    # Relationships
    delivery: Mapped["Delivery"] = relationship("Delivery", back_populates="lines")
    product: Mapped["Product"] = relationship("Product")


register_number_column(DocumentKind.DELIVERY, Delivery.delivery_number)

# Import at the end to avoid circular imports
from src.modules.inventory.models import Product
from src.modules.warehouses.models import Warehouse
