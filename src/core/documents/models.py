from datetime import datetime
from enum import StrEnum

from sqlalchemy import BigInteger, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column


class DocumentStatus(StrEnum):
    """Lifecycle of an inventory document."""

    DRAFT = "draft"
    DONE = "done"
    CANCELLED = "cancelled"


class DocumentMixin:
    """Columns shared by adjustments, deliveries, receipts and transfers.

    The document number column itself is declared on each model
    (``adjustment_number``, ``delivery_number``, ...) so the API field names
    stay kind-specific.
    """

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DocumentStatus.DRAFT.value, index=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id"), nullable=False
    )
    validated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    @property
    def is_draft(self) -> bool:
        return self.status == DocumentStatus.DRAFT.value
