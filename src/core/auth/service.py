import logging
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.jwt import REFRESH_TOKEN, create_token_pair, decode_token
from src.core.auth.models import User, UserRole
from src.core.auth.password import hash_password, verify_password
from src.core.exceptions import AuthenticationError, DuplicateError

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _ensure_active(user: User | None) -> User:
    if user is None:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthenticationError("User account is deactivated")
    return user


class AuthService:
    """Dashboard users: creation, login and token refresh."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_user_by_email(self, email: str) -> User | None:
        result = await self.session.execute(
            select(User).where(func.lower(User.email) == _normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def get_user_by_id(self, user_id: int) -> User | None:
        return await self.session.get(User, user_id)

    async def create_user(
        self,
        email: str,
        password: str,
        full_name: str,
        role: UserRole,
    ) -> User:
        """Create an active user; emails are unique case-insensitively."""
        if await self.get_user_by_email(email):
            raise DuplicateError("User", "email", email)

        user = User(
            email=_normalize_email(email),
            password_hash=hash_password(password),
            full_name=full_name,
            role=UserRole(role).value,
            is_active=True,
        )
        self.session.add(user)
        await self.session.flush()
        logger.info("Created user %s (%s)", user.email, user.role)
        return user

    async def authenticate(self, email: str, password: str) -> tuple[User, str, str]:
        """
        Check credentials and issue a token pair.

        Returns:
            (user, access_token, refresh_token)

        Raises:
            AuthenticationError: unknown email, wrong password or inactive user
        """
        user = await self.get_user_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt for %s", email)
            raise AuthenticationError("Invalid email or password")
        _ensure_active(user)

        user.last_login_at = datetime.now(timezone.utc)
        await self.session.flush()

        return (user, *create_token_pair(user.id, user.role))

    async def refresh_tokens(self, refresh_token: str) -> tuple[str, str]:
        """Swap a valid refresh token for a new (access, refresh) pair."""
        payload = decode_token(refresh_token, token_type=REFRESH_TOKEN)
        user = _ensure_active(await self.get_user_by_id(int(payload["sub"])))
        return create_token_pair(user.id, user.role)
