"""Tests for Deliveries module."""

from datetime import datetime

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.models import UserRole
from src.core.auth.service import AuthService
from src.core.documents import DocumentStatus
from src.core.exceptions import InsufficientStockError, ValidationError
from src.modules.deliveries.schemas import DeliveryCreate, DeliveryFilters, DeliveryLineCreate
from src.modules.deliveries.service import DeliveryService
from src.modules.inventory.models import MovementType
from src.modules.inventory.schemas import ProductCreate
from src.modules.inventory.service import InventoryService
from src.modules.warehouses.schemas import WarehouseCreate
from src.modules.warehouses.service import WarehouseService


class TestDeliveryService:
    """Tests for DeliveryService."""

    async def _setup(self, db_session: AsyncSession, stock: int = 10) -> tuple[int, int, int]:
        """Create admin, warehouse and a stocked product; return their ids."""
        user = await AuthService(db_session).create_user(
            email="admin@warehouse.com",
            password="Password123",
            full_name="Admin",
            role=UserRole.ADMIN,
        )
        warehouse = await WarehouseService(db_session).create_warehouse(
            WarehouseCreate(name="Main")
        )
        inventory = InventoryService(db_session)
        product = await inventory.create_product(ProductCreate(name="Widget"))
        if stock:
            await inventory.apply_movement(
                product_id=product.id,
                warehouse_id=warehouse.id,
                quantity_delta=stock,
                movement_type=MovementType.RECEIPT,
                created_by_id=user.id,
            )
            await db_session.commit()
        return user.id, warehouse.id, product.id

    def _data(self, warehouse_id: int, product_id: int, quantity: int, **kwargs) -> DeliveryCreate:
        return DeliveryCreate(
            warehouse_id=warehouse_id,
            customer_name="Acme Ltd",
            items=[DeliveryLineCreate(product_id=product_id, quantity=quantity)],
            **kwargs,
        )

    async def test_create_is_draft(self, db_session: AsyncSession):
        admin_id, warehouse_id, product_id = await self._setup(db_session)

        delivery = await DeliveryService(db_session).create_delivery(
            self._data(warehouse_id, product_id, 4), created_by_id=admin_id
        )

        assert delivery.delivery_number == f"DEL-{datetime.now().year}-001"
        assert delivery.status == DocumentStatus.DRAFT
        assert len(delivery.lines) == 1
        assert delivery.lines[0].product.name == "Widget"
        # Drafts do not touch stock
        assert await InventoryService(db_session).get_quantity(product_id, warehouse_id) == 10

    async def test_validate_takes_stock(self, db_session: AsyncSession):
        admin_id, warehouse_id, product_id = await self._setup(db_session)
        service = DeliveryService(db_session)
        delivery = await service.create_delivery(
            self._data(warehouse_id, product_id, 4), created_by_id=admin_id
        )

        delivery = await service.validate_delivery(delivery.id, admin_id)

        assert delivery.status == DocumentStatus.DONE
        assert delivery.validated_at is not None
        assert await InventoryService(db_session).get_quantity(product_id, warehouse_id) == 6

    async def test_validate_insufficient_stock(self, db_session: AsyncSession):
        admin_id, warehouse_id, product_id = await self._setup(db_session, stock=2)
        service = DeliveryService(db_session)
        delivery = await service.create_delivery(
            self._data(warehouse_id, product_id, 5), created_by_id=admin_id
        )

        with pytest.raises(InsufficientStockError):
            await service.validate_delivery(delivery.id, admin_id)

        assert await InventoryService(db_session).get_quantity(product_id, warehouse_id) == 2

    async def test_lines_of_same_product_are_summed(self, db_session: AsyncSession):
        """Test that stock is checked against the total of all lines per product."""
        admin_id, warehouse_id, product_id = await self._setup(db_session, stock=5)
        service = DeliveryService(db_session)
        delivery = await service.create_delivery(
            DeliveryCreate(
                warehouse_id=warehouse_id,
                customer_name="Acme Ltd",
                items=[
                    DeliveryLineCreate(product_id=product_id, quantity=3),
                    DeliveryLineCreate(product_id=product_id, quantity=3),
                ],
            ),
            created_by_id=admin_id,
        )

        with pytest.raises(InsufficientStockError) as exc_info:
            await service.validate_delivery(delivery.id, admin_id)

        assert exc_info.value.details["requested"] == 6
        assert await InventoryService(db_session).get_quantity(product_id, warehouse_id) == 5

    async def test_validate_twice_rejected(self, db_session: AsyncSession):
        admin_id, warehouse_id, product_id = await self._setup(db_session)
        service = DeliveryService(db_session)
        delivery = await service.create_delivery(
            self._data(warehouse_id, product_id, 1), created_by_id=admin_id
        )
        await service.validate_delivery(delivery.id, admin_id)

        with pytest.raises(ValidationError):
            await service.validate_delivery(delivery.id, admin_id)

    async def test_cancel_draft(self, db_session: AsyncSession):
        admin_id, warehouse_id, product_id = await self._setup(db_session)
        service = DeliveryService(db_session)
        delivery = await service.create_delivery(
            self._data(warehouse_id, product_id, 1), created_by_id=admin_id
        )

        delivery = await service.cancel_delivery(delivery.id)

        assert delivery.status == DocumentStatus.CANCELLED
        with pytest.raises(ValidationError):
            await service.validate_delivery(delivery.id, admin_id)

    async def test_search_by_customer(self, db_session: AsyncSession):
        admin_id, warehouse_id, product_id = await self._setup(db_session)
        service = DeliveryService(db_session)
        await service.create_delivery(
            self._data(warehouse_id, product_id, 1), created_by_id=admin_id
        )

        deliveries, total = await service.list_deliveries(DeliveryFilters(search="acme"))

        assert total == 1
        assert deliveries[0].customer_name == "Acme Ltd"


class TestDeliveryEndpoints:
    """Tests for delivery API endpoints."""

    async def test_next_number_and_validate(self, client: AsyncClient, db_session: AsyncSession):
        await AuthService(db_session).create_user(
            email="admin@warehouse.com",
            password="Password123",
            full_name="Admin",
            role=UserRole.ADMIN,
        )
        await db_session.commit()
        login = await client.post(
            "/api/auth/login",
            json={"email": "admin@warehouse.com", "password": "Password123"},
        )
        headers = {"Authorization": f"Bearer {login.json()['data']['access_token']}"}
        warehouse = await client.post("/api/warehouses", json={"name": "Main"}, headers=headers)
        warehouse_id = warehouse.json()["data"]["id"]
        product = await client.post("/api/products", json={"name": "Widget"}, headers=headers)
        product_id = product.json()["data"]["id"]
        await client.post(
            "/api/adjustments",
            json={"warehouse_id": warehouse_id, "product_id": product_id, "increase_by": 5},
            headers=headers,
        )

        next_number = (await client.get("/api/deliveries/next-number")).json()["next"]
        assert next_number == f"DEL-{datetime.now().year}-001"

        response = await client.post(
            "/api/deliveries",
            json={
                "delivery_number": next_number,
                "warehouse_id": warehouse_id,
                "customer_name": "Acme Ltd",
                "items": [{"product_id": product_id, "quantity": 2}],
            },
            headers=headers,
        )
        assert response.status_code == 201
        delivery_id = response.json()["data"]["id"]

        response = await client.post(f"/api/deliveries/{delivery_id}/validate", headers=headers)
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "done"

        response = await client.get(f"/api/products/{product_id}", headers=headers)
        assert response.json()["data"]["current_stock"] == 3

    async def test_create_without_items_rejected(
        self, client: AsyncClient, db_session: AsyncSession
    ):
        await AuthService(db_session).create_user(
            email="admin@warehouse.com",
            password="Password123",
            full_name="Admin",
            role=UserRole.ADMIN,
        )
        await db_session.commit()
        login = await client.post(
            "/api/auth/login",
            json={"email": "admin@warehouse.com", "password": "Password123"},
        )
        headers = {"Authorization": f"Bearer {login.json()['data']['access_token']}"}

        response = await client.post(
            "/api/deliveries",
            json={"warehouse_id": 1, "customer_name": "Acme Ltd", "items": []},
            headers=headers,
        )

        assert response.status_code == 422
