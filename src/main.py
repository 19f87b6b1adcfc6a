"""Warehouse dashboard FastAPI application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from src.core.auth.router import router as auth_router
from src.core.config import settings
from src.core.database import engine
from src.core.exceptions import AppException
from src.core.exceptions.handlers import (
    app_exception_handler,
    http_exception_handler,
    sqlalchemy_db_error_handler,
    validation_exception_handler,
)
from src.core.logging import configure_logging
from src.modules.adjustments.router import router as adjustments_router
from src.modules.deliveries.router import router as deliveries_router
from src.modules.inventory.router import router as inventory_router
from src.modules.receipts.router import router as receipts_router
from src.modules.transfers.router import router as transfers_router
from src.modules.warehouses.router import router as warehouses_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    logger.info("Warehouse dashboard starting (env=%s)", settings.app_env)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Warehouse Dashboard",
        description="Warehouse operations: stock documents, products and warehouses",
        version="0.1.0",
        debug=settings.debug,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_db_error_handler)

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    for router in (
        auth_router,
        warehouses_router,
        inventory_router,
        adjustments_router,
        deliveries_router,
        receipts_router,
        transfers_router,
    ):
        app.include_router(router, prefix=settings.api_prefix)

    return app


app = create_app()
