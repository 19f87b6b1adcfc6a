"""Tests for Adjustments module."""

from datetime import datetime

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.models import UserRole
from src.core.auth.service import AuthService
from src.core.documents import DocumentStatus
from src.core.documents.service import DocumentNumberService
from src.core.exceptions import DuplicateError, ValidationError
from src.modules.adjustments.schemas import AdjustmentCreate, AdjustmentFilters
from src.modules.adjustments.service import AdjustmentService
from src.modules.inventory.schemas import ProductCreate
from src.modules.inventory.service import InventoryService
from src.modules.warehouses.schemas import WarehouseCreate
from src.modules.warehouses.service import WarehouseService


class TestAdjustmentService:
    """Tests for AdjustmentService."""

    async def _setup(self, db_session: AsyncSession) -> tuple[int, int, int]:
        """Create admin, warehouse and product; return their ids."""
        user = await AuthService(db_session).create_user(
            email="admin@warehouse.com",
            password="Password123",
            full_name="Admin",
            role=UserRole.ADMIN,
        )
        warehouse = await WarehouseService(db_session).create_warehouse(
            WarehouseCreate(name="Main")
        )
        product = await InventoryService(db_session).create_product(
            ProductCreate(name="Widget", sku="W-1")
        )
        return user.id, warehouse.id, product.id

    async def test_increase_applies_stock(self, db_session: AsyncSession):
        admin_id, warehouse_id, product_id = await self._setup(db_session)
        service = AdjustmentService(db_session)

        adjustment = await service.create_adjustment(
            AdjustmentCreate(
                warehouse_id=warehouse_id,
                product_id=product_id,
                increase_by=10,
                notes="Initial count",
            ),
            created_by_id=admin_id,
        )

        year = datetime.now().year
        assert adjustment.adjustment_number == f"ADJ-{year}-001"
        assert adjustment.system_quantity == 0
        assert adjustment.counted_quantity == 10
        assert adjustment.difference == 10
        assert adjustment.status == DocumentStatus.DONE
        assert adjustment.reason == "Initial count"
        assert await InventoryService(db_session).get_quantity(product_id, warehouse_id) == 10

    async def test_sequential_numbers(self, db_session: AsyncSession):
        admin_id, warehouse_id, product_id = await self._setup(db_session)
        service = AdjustmentService(db_session)

        numbers = []
        for _ in range(3):
            adjustment = await service.create_adjustment(
                AdjustmentCreate(warehouse_id=warehouse_id, product_id=product_id, increase_by=1),
                created_by_id=admin_id,
            )
            numbers.append(adjustment.adjustment_number)

        year = datetime.now().year
        assert numbers == [f"ADJ-{year}-001", f"ADJ-{year}-002", f"ADJ-{year}-003"]

    async def test_decrease(self, db_session: AsyncSession):
        admin_id, warehouse_id, product_id = await self._setup(db_session)
        service = AdjustmentService(db_session)
        await service.create_adjustment(
            AdjustmentCreate(warehouse_id=warehouse_id, product_id=product_id, increase_by=10),
            created_by_id=admin_id,
        )

        adjustment = await service.create_adjustment(
            AdjustmentCreate(warehouse_id=warehouse_id, product_id=product_id, decrease_by=4),
            created_by_id=admin_id,
        )

        assert adjustment.system_quantity == 10
        assert adjustment.counted_quantity == 6
        assert adjustment.difference == -4

    async def test_decrease_below_zero(self, db_session: AsyncSession):
        admin_id, warehouse_id, product_id = await self._setup(db_session)

        with pytest.raises(ValidationError) as exc_info:
            await AdjustmentService(db_session).create_adjustment(
                AdjustmentCreate(warehouse_id=warehouse_id, product_id=product_id, decrease_by=1),
                created_by_id=admin_id,
            )

        assert exc_info.value.details["field"] == "decrease_by"

    async def test_net_zero_rejected(self, db_session: AsyncSession):
        admin_id, warehouse_id, product_id = await self._setup(db_session)

        with pytest.raises(ValidationError):
            await AdjustmentService(db_session).create_adjustment(
                AdjustmentCreate(
                    warehouse_id=warehouse_id,
                    product_id=product_id,
                    increase_by=2,
                    decrease_by=2,
                ),
                created_by_id=admin_id,
            )

    async def test_new_product_created(self, db_session: AsyncSession):
        admin_id, warehouse_id, _ = await self._setup(db_session)

        adjustment = await AdjustmentService(db_session).create_adjustment(
            AdjustmentCreate(
                warehouse_id=warehouse_id,
                new_product_name="  Gadget ",
                increase_by=5,
            ),
            created_by_id=admin_id,
        )

        assert adjustment.product.name == "Gadget"
        assert adjustment.counted_quantity == 5

    async def test_client_number_kept(self, db_session: AsyncSession):
        """Test that a fallback number from the client is stored as given."""
        admin_id, warehouse_id, product_id = await self._setup(db_session)

        adjustment = await AdjustmentService(db_session).create_adjustment(
            AdjustmentCreate(
                adjustment_number="ADJ-2024-482913",
                warehouse_id=warehouse_id,
                product_id=product_id,
                increase_by=1,
            ),
            created_by_id=admin_id,
        )

        assert adjustment.adjustment_number == "ADJ-2024-482913"

    async def test_duplicate_client_number(self, db_session: AsyncSession):
        admin_id, warehouse_id, product_id = await self._setup(db_session)
        service = AdjustmentService(db_session)
        data = AdjustmentCreate(
            adjustment_number="ADJ-2024-001",
            warehouse_id=warehouse_id,
            product_id=product_id,
            increase_by=1,
        )
        await service.create_adjustment(data, created_by_id=admin_id)

        with pytest.raises(DuplicateError):
            await service.create_adjustment(data, created_by_id=admin_id)

        assert await InventoryService(db_session).get_quantity(product_id, warehouse_id) == 1

    async def test_list_and_search(self, db_session: AsyncSession):
        admin_id, warehouse_id, product_id = await self._setup(db_session)
        service = AdjustmentService(db_session)
        for number in ["ADJ-2024-001", "ADJ-2024-002"]:
            await service.create_adjustment(
                AdjustmentCreate(
                    adjustment_number=number,
                    warehouse_id=warehouse_id,
                    product_id=product_id,
                    increase_by=1,
                ),
                created_by_id=admin_id,
            )

        adjustments, total = await service.list_adjustments(AdjustmentFilters(search="002"))

        assert total == 1
        assert adjustments[0].adjustment_number == "ADJ-2024-002"


class TestAdjustmentSchemas:
    """Tests for adjustment request validation."""

    def test_requires_product(self):
        with pytest.raises(ValueError):
            AdjustmentCreate(warehouse_id=1, increase_by=1)

    def test_requires_quantity(self):
        with pytest.raises(ValueError):
            AdjustmentCreate(warehouse_id=1, product_id=1)


class TestAdjustmentEndpoints:
    """Tests for adjustment API endpoints."""

    async def _get_token(self, client: AsyncClient, db_session: AsyncSession) -> str:
        await AuthService(db_session).create_user(
            email="admin@warehouse.com",
            password="Password123",
            full_name="Admin",
            role=UserRole.ADMIN,
        )
        await db_session.commit()
        response = await client.post(
            "/api/auth/login",
            json={"email": "admin@warehouse.com", "password": "Password123"},
        )
        return response.json()["data"]["access_token"]

    async def _create_refs(
        self, client: AsyncClient, headers: dict[str, str]
    ) -> tuple[int, int]:
        response = await client.post("/api/warehouses", json={"name": "Main"}, headers=headers)
        warehouse_id = response.json()["data"]["id"]
        response = await client.post("/api/products", json={"name": "Widget"}, headers=headers)
        product_id = response.json()["data"]["id"]
        return warehouse_id, product_id

    async def test_next_number_then_create(self, client: AsyncClient, db_session: AsyncSession):
        """Test the form flow: fetch the next number, submit it, fetch again."""
        token = await self._get_token(client, db_session)
        headers = {"Authorization": f"Bearer {token}"}
        warehouse_id, product_id = await self._create_refs(client, headers)
        year = datetime.now().year

        response = await client.get("/api/adjustments/next-number")
        assert response.status_code == 200
        assert response.json() == {"next": f"ADJ-{year}-001"}

        response = await client.post(
            "/api/adjustments",
            json={
                "adjustment_number": response.json()["next"],
                "warehouse_id": warehouse_id,
                "product_id": product_id,
                "increase_by": 3,
            },
            headers=headers,
        )
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["adjustment_number"] == f"ADJ-{year}-001"
        assert data["product"]["name"] == "Widget"
        assert data["warehouse"]["name"] == "Main"

        response = await client.get("/api/adjustments/next-number")
        assert response.json() == {"next": f"ADJ-{year}-002"}

    async def test_next_number_requires_no_auth(self, client: AsyncClient):
        response = await client.get("/api/adjustments/next-number")
        assert response.status_code == 200
        assert set(response.json()) == {"next"}

    async def test_next_number_failure_returns_500(self, client: AsyncClient, monkeypatch):
        async def failing_next_number(self, kind, now=None):
            raise RuntimeError("boom")

        monkeypatch.setattr(DocumentNumberService, "next_number", failing_next_number)

        response = await client.get("/api/adjustments/next-number")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to compute next adjustment number"}

    async def test_duplicate_number_returns_409(
        self, client: AsyncClient, db_session: AsyncSession
    ):
        token = await self._get_token(client, db_session)
        headers = {"Authorization": f"Bearer {token}"}
        warehouse_id, product_id = await self._create_refs(client, headers)
        payload = {
            "adjustment_number": "ADJ-2024-001",
            "warehouse_id": warehouse_id,
            "product_id": product_id,
            "increase_by": 1,
        }

        first = await client.post("/api/adjustments", json=payload, headers=headers)
        second = await client.post("/api/adjustments", json=payload, headers=headers)

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["success"] is False

    async def test_create_requires_auth(self, client: AsyncClient):
        response = await client.post(
            "/api/adjustments", json={"warehouse_id": 1, "product_id": 1, "increase_by": 1}
        )
        assert response.status_code == 401

    async def test_list(self, client: AsyncClient, db_session: AsyncSession):
        token = await self._get_token(client, db_session)
        headers = {"Authorization": f"Bearer {token}"}
        warehouse_id, product_id = await self._create_refs(client, headers)
        await client.post(
            "/api/adjustments",
            json={"warehouse_id": warehouse_id, "product_id": product_id, "increase_by": 2},
            headers=headers,
        )

        response = await client.get(
            "/api/adjustments", params={"warehouse_id": warehouse_id}, headers=headers
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total"] == 1
        assert data["items"][0]["difference"] == 2
