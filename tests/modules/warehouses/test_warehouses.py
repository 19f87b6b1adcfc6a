"""Tests for Warehouses module."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.models import UserRole
from src.core.exceptions import DuplicateError, NotFoundError, ValidationError
from src.modules.warehouses.schemas import WarehouseCreate, WarehouseUpdate
from src.modules.warehouses.service import WarehouseService


class TestWarehouseService:
    """Tests for WarehouseService."""

    async def test_create_warehouse(self, db_session: AsyncSession):
        service = WarehouseService(db_session)

        warehouse = await service.create_warehouse(
            WarehouseCreate(name="  Main  ", code="WH1", location="Dock 4")
        )

        assert warehouse.id is not None
        assert warehouse.name == "Main"
        assert warehouse.is_active is True

    async def test_duplicate_name(self, db_session: AsyncSession):
        service = WarehouseService(db_session)
        await service.create_warehouse(WarehouseCreate(name="Main"))

        with pytest.raises(DuplicateError):
            await service.create_warehouse(WarehouseCreate(name="Main"))

    async def test_duplicate_code(self, db_session: AsyncSession):
        service = WarehouseService(db_session)
        await service.create_warehouse(WarehouseCreate(name="Main", code="WH1"))

        with pytest.raises(DuplicateError):
            await service.create_warehouse(WarehouseCreate(name="Overflow", code="WH1"))

    async def test_get_missing_warehouse(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await WarehouseService(db_session).get_warehouse_by_id(999)

    async def test_inactive_warehouse_rejected_for_documents(self, db_session: AsyncSession):
        service = WarehouseService(db_session)
        warehouse = await service.create_warehouse(WarehouseCreate(name="Old"))
        await service.update_warehouse(warehouse.id, WarehouseUpdate(is_active=False))

        with pytest.raises(ValidationError) as exc_info:
            await service.get_active_warehouse(warehouse.id)

        assert "inactive" in exc_info.value.message

    async def test_list_excludes_inactive_by_default(self, db_session: AsyncSession):
        service = WarehouseService(db_session)
        await service.create_warehouse(WarehouseCreate(name="Main"))
        old = await service.create_warehouse(WarehouseCreate(name="Old"))
        await service.update_warehouse(old.id, WarehouseUpdate(is_active=False))

        active, total = await service.list_warehouses()
        everything, total_all = await service.list_warehouses(include_inactive=True)

        assert [w.name for w in active] == ["Main"]
        assert total == 1
        assert total_all == 2


class TestWarehouseEndpoints:
    """Tests for warehouse API endpoints."""

    async def test_create_and_get(self, client: AsyncClient, login_headers):
        headers = await login_headers(UserRole.MANAGER)

        response = await client.post(
            "/api/warehouses",
            json={"name": "Main", "code": "WH1", "location": "North"},
            headers=headers,
        )
        assert response.status_code == 201
        warehouse_id = response.json()["data"]["id"]

        response = await client.get(f"/api/warehouses/{warehouse_id}", headers=headers)
        assert response.status_code == 200
        assert response.json()["data"]["code"] == "WH1"

    async def test_duplicate_returns_409(self, client: AsyncClient, login_headers):
        headers = await login_headers(UserRole.MANAGER)

        await client.post("/api/warehouses", json={"name": "Main"}, headers=headers)
        response = await client.post("/api/warehouses", json={"name": "Main"}, headers=headers)

        assert response.status_code == 409
        assert response.json()["success"] is False

    async def test_list_requires_auth(self, client: AsyncClient):
        response = await client.get("/api/warehouses")
        assert response.status_code == 401
