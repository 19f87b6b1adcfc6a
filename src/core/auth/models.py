from datetime import datetime
from enum import StrEnum

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database.base import BaseModel


class UserRole(StrEnum):
    """Dashboard user roles.

    Admin and Manager maintain warehouses and products; Operator records
    and validates stock documents.
    """

    ADMIN = "Admin"
    MANAGER = "Manager"
    OPERATOR = "Operator"


class User(BaseModel):
    """Warehouse staff member who can sign in to the dashboard."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    # Stored as the UserRole value
    role: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    @property
    def user_role(self) -> UserRole:
        return UserRole(self.role)

    def has_role(self, *roles: UserRole) -> bool:
        return self.user_role in roles
