"""Tests for Inventory module."""

from decimal import Decimal

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.models import UserRole
from src.core.auth.service import AuthService
from src.core.exceptions import (
    DuplicateError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from src.modules.inventory.models import MovementType
from src.modules.inventory.schemas import ProductCreate, ProductUpdate
from src.modules.inventory.service import InventoryService
from src.modules.warehouses.schemas import WarehouseCreate
from src.modules.warehouses.service import WarehouseService


class TestInventoryService:
    """Tests for InventoryService."""

    async def _create_admin(self, db_session: AsyncSession) -> int:
        """Helper to create admin."""
        user = await AuthService(db_session).create_user(
            email="admin@warehouse.com",
            password="Password123",
            full_name="Admin",
            role=UserRole.ADMIN,
        )
        return user.id

    async def _create_warehouse(self, db_session: AsyncSession, name: str = "Main") -> int:
        warehouse = await WarehouseService(db_session).create_warehouse(WarehouseCreate(name=name))
        return warehouse.id

    async def test_create_product(self, db_session: AsyncSession):
        service = InventoryService(db_session)

        product = await service.create_product(
            ProductCreate(name=" Widget ", sku="W-1", selling_price=Decimal("9.99"))
        )

        assert product.id is not None
        assert product.name == "Widget"
        assert product.unit_of_measure == "unit"
        assert product.current_stock == 0

    async def test_duplicate_sku(self, db_session: AsyncSession):
        service = InventoryService(db_session)
        await service.create_product(ProductCreate(name="Widget", sku="W-1"))

        with pytest.raises(DuplicateError):
            await service.create_product(ProductCreate(name="Other", sku="W-1"))

    async def test_update_product(self, db_session: AsyncSession):
        service = InventoryService(db_session)
        product = await service.create_product(ProductCreate(name="Widget"))

        updated = await service.update_product(
            product.id, ProductUpdate(name="Gadget", is_active=False)
        )

        assert updated.name == "Gadget"
        assert updated.is_active is False

    async def test_get_missing_product(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await InventoryService(db_session).get_product_by_id(999)

    async def test_apply_movement_per_warehouse(self, db_session: AsyncSession):
        """Test that stock is tracked per warehouse and totalled per product."""
        admin_id = await self._create_admin(db_session)
        main_id = await self._create_warehouse(db_session, "Main")
        overflow_id = await self._create_warehouse(db_session, "Overflow")
        service = InventoryService(db_session)
        product = await service.create_product(ProductCreate(name="Widget"))

        await service.apply_movement(
            product_id=product.id,
            warehouse_id=main_id,
            quantity_delta=10,
            movement_type=MovementType.RECEIPT,
            created_by_id=admin_id,
        )
        movement = await service.apply_movement(
            product_id=product.id,
            warehouse_id=overflow_id,
            quantity_delta=4,
            movement_type=MovementType.RECEIPT,
            created_by_id=admin_id,
        )
        await db_session.commit()

        assert movement.quantity_before == 0
        assert movement.quantity_after == 4
        assert await service.get_quantity(product.id, main_id) == 10
        assert await service.get_quantity(product.id, overflow_id) == 4

        product = await service.get_product_by_id(product.id)
        assert product.current_stock == 14

    async def test_movement_cannot_go_negative(self, db_session: AsyncSession):
        admin_id = await self._create_admin(db_session)
        warehouse_id = await self._create_warehouse(db_session)
        service = InventoryService(db_session)
        product = await service.create_product(ProductCreate(name="Widget"))
        await service.apply_movement(
            product_id=product.id,
            warehouse_id=warehouse_id,
            quantity_delta=3,
            movement_type=MovementType.RECEIPT,
            created_by_id=admin_id,
        )

        with pytest.raises(InsufficientStockError) as exc_info:
            await service.apply_movement(
                product_id=product.id,
                warehouse_id=warehouse_id,
                quantity_delta=-5,
                movement_type=MovementType.DELIVERY,
                created_by_id=admin_id,
            )

        assert exc_info.value.details["available"] == 3
        assert exc_info.value.details["requested"] == 5
        assert await service.get_quantity(product.id, warehouse_id) == 3

    async def test_zero_movement_rejected(self, db_session: AsyncSession):
        admin_id = await self._create_admin(db_session)
        warehouse_id = await self._create_warehouse(db_session)
        service = InventoryService(db_session)
        product = await service.create_product(ProductCreate(name="Widget"))

        with pytest.raises(ValidationError):
            await service.apply_movement(
                product_id=product.id,
                warehouse_id=warehouse_id,
                quantity_delta=0,
                movement_type=MovementType.ADJUSTMENT,
                created_by_id=admin_id,
            )

    async def test_movement_to_missing_warehouse(self, db_session: AsyncSession):
        admin_id = await self._create_admin(db_session)
        service = InventoryService(db_session)
        product = await service.create_product(ProductCreate(name="Widget"))

        with pytest.raises(NotFoundError):
            await service.apply_movement(
                product_id=product.id,
                warehouse_id=999,
                quantity_delta=1,
                movement_type=MovementType.RECEIPT,
                created_by_id=admin_id,
            )

    async def test_list_movements(self, db_session: AsyncSession):
        admin_id = await self._create_admin(db_session)
        warehouse_id = await self._create_warehouse(db_session)
        service = InventoryService(db_session)
        product = await service.create_product(ProductCreate(name="Widget"))
        for delta in (5, -2):
            await service.apply_movement(
                product_id=product.id,
                warehouse_id=warehouse_id,
                quantity_delta=delta,
                movement_type=MovementType.ADJUSTMENT,
                created_by_id=admin_id,
            )
        await db_session.commit()

        movements, total = await service.list_movements(product_id=product.id)

        assert total == 2
        assert sorted(m.quantity for m in movements) == [-2, 5]


class TestProductEndpoints:
    """Tests for product API endpoints."""

    async def test_create_list_and_search(self, client: AsyncClient, login_headers):
        headers = await login_headers()

        for name, sku in [("Blue Widget", "BW-1"), ("Red Gadget", "RG-1")]:
            response = await client.post(
                "/api/products", json={"name": name, "sku": sku}, headers=headers
            )
            assert response.status_code == 201

        response = await client.get("/api/products", params={"search": "widget"}, headers=headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total"] == 1
        assert data["items"][0]["sku"] == "BW-1"

    async def test_stock_endpoint(self, client: AsyncClient, login_headers):
        headers = await login_headers()
        response = await client.post("/api/products", json={"name": "Widget"}, headers=headers)
        product_id = response.json()["data"]["id"]

        response = await client.get(f"/api/products/{product_id}/stock", headers=headers)

        assert response.status_code == 200
        assert response.json()["data"] == []

    async def test_missing_product_returns_404(self, client: AsyncClient, login_headers):
        headers = await login_headers()
        response = await client.get("/api/products/999", headers=headers)
        assert response.status_code == 404

    async def test_movements_endpoint_lists_adjustment(
        self, client: AsyncClient, login_headers
    ):
        headers = await login_headers()
        warehouse = await client.post("/api/warehouses", json={"name": "Main"}, headers=headers)
        product = await client.post("/api/products", json={"name": "Widget"}, headers=headers)
        warehouse_id = warehouse.json()["data"]["id"]
        product_id = product.json()["data"]["id"]
        await client.post(
            "/api/adjustments",
            json={"warehouse_id": warehouse_id, "product_id": product_id, "increase_by": 4},
            headers=headers,
        )

        response = await client.get(
            f"/api/products/{product_id}/movements",
            params={"warehouse_id": warehouse_id},
            headers=headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total"] == 1
        movement = data["items"][0]
        assert movement["movement_type"] == "adjustment"
        assert movement["reference_type"] == "adjustment"
        assert (movement["quantity_before"], movement["quantity_after"]) == (0, 4)
