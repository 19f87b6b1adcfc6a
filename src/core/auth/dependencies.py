from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.jwt import ACCESS_TOKEN, decode_token
from src.core.auth.models import User, UserRole
from src.core.auth.service import AuthService
from src.core.database import get_db
from src.core.exceptions import AuthenticationError, AuthorizationError

BEARER_PREFIX = "Bearer "


def _bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise AuthenticationError("Authorization header required")
    if not authorization.startswith(BEARER_PREFIX):
        raise AuthenticationError("Invalid authorization header format")
    return authorization[len(BEARER_PREFIX):].strip()


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Active user identified by the request's bearer access token."""
    payload = decode_token(_bearer_token(authorization), token_type=ACCESS_TOKEN)
    user = await AuthService(db).get_user_by_id(int(payload["sub"]))

    if user is None:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthenticationError("User account is deactivated")
    return user


def require_roles(*roles: UserRole):
    """
    Build a dependency that lets only ``roles`` through (403 otherwise).

    Usage:
        @router.patch("/{product_id}")
        async def update_product(current_user: ManagerUser, ...):
    """
    allowed = ", ".join(role.value for role in roles)

    async def check_role(current_user: User = Depends(get_current_user)) -> User:
        if not current_user.has_role(*roles):
            raise AuthorizationError(f"Required role: {allowed}")
        return current_user

    return check_role


CurrentUser = Annotated[User, Depends(get_current_user)]
# Warehouse and product maintenance
ManagerUser = Annotated[User, Depends(require_roles(UserRole.ADMIN, UserRole.MANAGER))]
