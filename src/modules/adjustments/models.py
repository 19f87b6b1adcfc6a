"""Stock adjustment documents (ADJ-YYYY-NNN)."""

from sqlalchemy import BigInteger, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.core.database.base import BaseModel
from src.core.documents import DocumentKind, DocumentMixin, register_number_column


class Adjustment(DocumentMixin, BaseModel):
    """Correction of one product's quantity in one warehouse."""

    __tablename__ = "adjustments"

    adjustment_number: Mapped[str] = mapped_column(
        String(50), nullable=False, unique=True, index=True
    )
    warehouse_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("warehouses.id"), nullable=False, index=True
    )
    product_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("products.id"), nullable=False, index=True
    )
    system_quantity: Mapped[int] = mapped_column(
        Integer, nullable=False
    )  # Stock before the adjustment
    counted_quantity: Mapped[int] = mapped_column(
        Integer, nullable=False
    )  # Stock after the adjustment
    difference: Mapped[int] = mapped_column(Integer, nullable=False)  # counted - system

    # Relationships
    warehouse: Mapped["Warehouse"] = relationship("Warehouse")
    product: Mapped["Product"] = relationship("Product")

    @property
    def reason(self) -> str | None:
        return self.notes


register_number_column(DocumentKind.ADJUSTMENT, Adjustment.adjustment_number)

# Import at the end to avoid circular imports
from src.modules.inventory.models import Product
from src.modules.warehouses.models import Warehouse
