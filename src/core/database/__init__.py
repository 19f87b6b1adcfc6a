from src.core.database.base import NAMING_CONVENTION, Base, BaseModel, BigIntPK
from src.core.database.session import (
    async_session,
    create_engine_for,
    enable_sqlite_savepoints,
    engine,
    get_db,
)

__all__ = [
    "Base",
    "BaseModel",
    "BigIntPK",
    "NAMING_CONVENTION",
    "async_session",
    "create_engine_for",
    "enable_sqlite_savepoints",
    "engine",
    "get_db",
]
