from datetime import datetime

from pydantic import EmailStr, Field

from src.core.auth.models import UserRole
from src.shared.schemas import BaseSchema


class LoginRequest(BaseSchema):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseSchema):
    refresh_token: str


class TokenResponse(BaseSchema):
    """Bearer token pair; expires_in is the access token lifetime in seconds."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class UserResponse(BaseSchema):
    id: int
    email: str
    full_name: str
    role: UserRole
    is_active: bool
    last_login_at: datetime | None
    created_at: datetime


class LoginResponse(TokenResponse):
    """Token pair plus the logged-in user."""

    user: UserResponse
