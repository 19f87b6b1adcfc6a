from src.core.auth.models import User, UserRole
from src.core.auth.service import AuthService
from src.core.auth.jwt import create_token_pair, decode_token
from src.core.auth.password import hash_password, verify_password
from src.core.auth.dependencies import (
    CurrentUser,
    ManagerUser,
    get_current_user,
    require_roles,
)

__all__ = [
    "User",
    "UserRole",
    "AuthService",
    "create_token_pair",
    "decode_token",
    "hash_password",
    "verify_password",
    "CurrentUser",
    "ManagerUser",
    "get_current_user",
    "require_roles",
]
