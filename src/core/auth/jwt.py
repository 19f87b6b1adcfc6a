from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from src.core.config import settings
from src.core.exceptions import AuthenticationError

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


def _encode(claims: dict[str, Any], expires_in: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {**claims, "iat": now, "exp": now + expires_in}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def access_token_ttl() -> timedelta:
    return timedelta(minutes=settings.access_token_expire_minutes)


def create_access_token(user_id: int, role: str) -> str:
    """Short-lived token carrying the user role."""
    return _encode(
        {"sub": str(user_id), "role": role, "type": ACCESS_TOKEN},
        access_token_ttl(),
    )


def create_refresh_token(user_id: int) -> str:
    return _encode(
        {"sub": str(user_id), "type": REFRESH_TOKEN},
        timedelta(days=settings.refresh_token_expire_days),
    )


def create_token_pair(user_id: int, role: str) -> tuple[str, str]:
    """Return (access_token, refresh_token)."""
    return create_access_token(user_id, role), create_refresh_token(user_id)


def decode_token(token: str, token_type: str = ACCESS_TOKEN) -> dict[str, Any]:
    """
    Decode and validate a bearer token.

    Raises:
        AuthenticationError: invalid signature, expired, wrong type or no subject
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        raise AuthenticationError(f"Invalid token: {e}") from e

    if payload.get("type") != token_type:
        raise AuthenticationError(f"Invalid token type, expected {token_type}")
    if not str(payload.get("sub", "")).isdigit():
        raise AuthenticationError("Invalid token subject")

    return payload
