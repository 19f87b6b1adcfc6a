"""Transfer documents (TRF-YYYY-NNN): stock moved between two warehouses."""

from sqlalchemy import BigInteger, CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.core.database.base import Base, BaseModel, BigIntPK
from src.core.documents import DocumentKind, DocumentMixin, register_number_column


class Transfer(DocumentMixin, BaseModel):
    """Inter-warehouse transfer."""

    __tablename__ = "transfers"

    transfer_number: Mapped[str] = mapped_column(
        String(50), nullable=False, unique=True, index=True
    )
    from_warehouse_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("warehouses.id"), nullable=False, index=True
    )
    to_warehouse_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("warehouses.id"), nullable=False, index=True
    )

    __table_args__ = (
        CheckConstraint(
            "from_warehouse_id <> to_warehouse_id", name="ck_transfers_distinct_warehouses"
        ),
    )

    # Relationships
    from_warehouse: Mapped["Warehouse"] = relationship(
        "Warehouse", foreign_keys=[from_warehouse_id]
    )
    to_warehouse: Mapped["Warehouse"] = relationship("Warehouse", foreign_keys=[to_warehouse_id])
    lines: Mapped[list["TransferLine"]] = relationship(
        "TransferLine",
        back_populates="transfer",
        cascade="all, delete-orphan",
        order_by="TransferLine.id",
    )


class TransferLine(Base):
    """Product and quantity moved by a transfer."""

    __tablename__ = "transfer_lines"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    transfer_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("transfers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("products.id"), nullable=False, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    transfer: Mapped["Transfer"] = relationship("Transfer", back_populates="lines")
    product: Mapped["Product"] = relationship("Product")


register_number_column(DocumentKind.TRANSFER, Transfer.transfer_number)

# Import at the end to avoid circular imports
from src.modules.inventory.models import Product
from src.modules.warehouses.models import Warehouse
