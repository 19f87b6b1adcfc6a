from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.auth.models import UserRole
from src.core.auth.service import AuthService
from src.core.database import Base, create_engine_for, get_db
from src.main import app

# Every test gets a fresh in-memory SQLite schema
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "Password123"

engine = create_engine_for(TEST_DATABASE_URL)
session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

LoginHeaders = Callable[..., Awaitable[dict[str, str]]]


@pytest.fixture(autouse=True)
async def setup_database():
    """Create all tables for the test, drop them afterwards."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """API client sharing ``db_session`` with the app."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def login_headers(client: AsyncClient, db_session: AsyncSession) -> LoginHeaders:
    """
    Factory: create a user with ``role`` and return bearer headers for it.

    Usage:
        headers = await login_headers(UserRole.MANAGER)
    """

    async def _login(role: UserRole = UserRole.ADMIN) -> dict[str, str]:
        email = f"{role.value.lower()}@warehouse.com"
        await AuthService(db_session).create_user(
            email=email, password=TEST_PASSWORD, full_name=role.value, role=role
        )
        await db_session.commit()
        response = await client.post(
            "/api/auth/login", json={"email": email, "password": TEST_PASSWORD}
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['data']['access_token']}"}

    return _login
