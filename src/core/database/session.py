import logging
from collections.abc import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.core.config import settings

logger = logging.getLogger(__name__)


def enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """
    Let SQLAlchemy emit BEGIN itself on SQLite connections.

    pysqlite/aiosqlite defer BEGIN until the first write, so a SAVEPOINT
    issued before any write opens (and its RELEASE commits) the outer
    transaction. With these listeners begin_nested() stays inside the
    session transaction and a later rollback undoes it.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_engine_for(url: str, echo: bool = False) -> AsyncEngine:
    """Async engine for ``url``; SQLite engines get savepoint support."""
    engine = create_async_engine(url, echo=echo)
    if make_url(url).get_backend_name() == "sqlite":
        enable_sqlite_savepoints(engine)
    return engine


logger.info(
    "Using database %s",
    make_url(settings.database_url).render_as_string(hide_password=True),
)

engine = create_engine_for(settings.database_url, echo=settings.debug)

# autoflush is off: services flush explicitly before reading back ids or stock
async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session: commit on success, roll back on any error."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
