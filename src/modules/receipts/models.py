"""Receipt documents (REC-YYYY-NNN): stock arriving from a supplier."""

from decimal import Decimal

from sqlalchemy import BigInteger, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.core.database.base import Base, BaseModel, BigIntPK
from src.core.documents import DocumentKind, DocumentMixin, register_number_column
from src.shared.utils.money import round_money


class Receipt(DocumentMixin, BaseModel):
    """Incoming goods receipt."""

    __tablename__ = "receipts"

    receipt_number: Mapped[str] = mapped_column(
        String(50), nullable=False, unique=True, index=True
    )
    warehouse_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("warehouses.id"), nullable=False, index=True
    )
    supplier_name: Mapped[str] = mapped_column(String(200), nullable=False)

    # Relationships
    warehouse: Mapped["Warehouse"] = relationship("Warehouse")
    lines: Mapped[list["ReceiptLine"]] = relationship(
        "ReceiptLine",
        back_populates="receipt",
        cascade="all, delete-orphan",
        order_by="ReceiptLine.id",
    )

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def total_amount(self) -> Decimal:
        return sum((line.line_total for line in self.lines), Decimal("0.00"))


class ReceiptLine(Base):
    """Product, quantity and unit price on a receipt."""

    __tablename__ = "receipt_lines"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    receipt_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("receipts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("products.id"), nullable=False, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(
        Numeric(15, 2), nullable=False, default=Decimal("0.00")
    )

    # Relationships
    receipt: Mapped["Receipt"] = relationship("Receipt", back_populates="lines")
    product: Mapped["Product"] = relationship("Product")

    @property
    def line_total(self) -> Decimal:
        return round_money(Decimal(self.quantity) * self.unit_price)


register_number_column(DocumentKind.RECEIPT, Receipt.receipt_number)

# Import at the end to avoid circular imports
from src.modules.inventory.models import Product
from src.modules.warehouses.models import Warehouse
