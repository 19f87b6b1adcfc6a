"""Tests for Transfers module."""

from datetime import datetime

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.models import UserRole
from src.core.auth.service import AuthService
from src.core.documents import DocumentStatus
from src.core.exceptions import InsufficientStockError, ValidationError
from src.modules.inventory.models import MovementType
from src.modules.inventory.schemas import ProductCreate
from src.modules.inventory.service import InventoryService
from src.modules.transfers.schemas import TransferCreate, TransferFilters, TransferLineCreate
from src.modules.transfers.service import TransferService
from src.modules.warehouses.schemas import WarehouseCreate
from src.modules.warehouses.service import WarehouseService


class TestTransferService:
    """Tests for TransferService."""

    async def _setup(self, db_session: AsyncSession, stock: int = 10) -> tuple[int, int, int, int]:
        """Create admin, two warehouses and a product stocked in the first."""
        user = await AuthService(db_session).create_user(
            email="admin@warehouse.com",
            password="Password123",
            full_name="Admin",
            role=UserRole.ADMIN,
        )
        warehouses = WarehouseService(db_session)
        main = await warehouses.create_warehouse(WarehouseCreate(name="Main"))
        overflow = await warehouses.create_warehouse(WarehouseCreate(name="Overflow"))
        inventory = InventoryService(db_session)
        product = await inventory.create_product(ProductCreate(name="Widget"))
        await inventory.apply_movement(
            product_id=product.id,
            warehouse_id=main.id,
            quantity_delta=stock,
            movement_type=MovementType.RECEIPT,
            created_by_id=user.id,
        )
        await db_session.commit()
        return user.id, main.id, overflow.id, product.id

    async def test_validate_moves_stock(self, db_session: AsyncSession):
        admin_id, main_id, overflow_id, product_id = await self._setup(db_session)
        service = TransferService(db_session)
        transfer = await service.create_transfer(
            TransferCreate(
                from_warehouse_id=main_id,
                to_warehouse_id=overflow_id,
                items=[TransferLineCreate(product_id=product_id, quantity=4)],
            ),
            created_by_id=admin_id,
        )
        assert transfer.transfer_number == f"TRF-{datetime.now().year}-001"
        assert transfer.from_warehouse.name == "Main"
        assert transfer.to_warehouse.name == "Overflow"

        transfer = await service.validate_transfer(transfer.id, admin_id)

        inventory = InventoryService(db_session)
        assert transfer.status == DocumentStatus.DONE
        assert await inventory.get_quantity(product_id, main_id) == 6
        assert await inventory.get_quantity(product_id, overflow_id) == 4
        # Total stock is unchanged by a transfer
        product = await inventory.get_product_by_id(product_id)
        assert product.current_stock == 10

        movements, total = await inventory.list_movements(
            reference_type="transfer", reference_id=transfer.id
        )
        assert total == 2
        assert {m.movement_type for m in movements} == {
            MovementType.TRANSFER_OUT.value,
            MovementType.TRANSFER_IN.value,
        }

    async def test_same_warehouse_rejected(self):
        with pytest.raises(ValueError):
            TransferCreate(from_warehouse_id=1, to_warehouse_id=1)

    async def test_insufficient_stock(self, db_session: AsyncSession):
        admin_id, main_id, overflow_id, product_id = await self._setup(db_session, stock=3)
        service = TransferService(db_session)
        transfer = await service.create_transfer(
            TransferCreate(
                from_warehouse_id=main_id,
                to_warehouse_id=overflow_id,
                items=[TransferLineCreate(product_id=product_id, quantity=4)],
            ),
            created_by_id=admin_id,
        )

        with pytest.raises(InsufficientStockError):
            await service.validate_transfer(transfer.id, admin_id)

        inventory = InventoryService(db_session)
        assert await inventory.get_quantity(product_id, main_id) == 3
        assert await inventory.get_quantity(product_id, overflow_id) == 0

    async def test_empty_transfer_cannot_be_validated(self, db_session: AsyncSession):
        admin_id, main_id, overflow_id, _ = await self._setup(db_session)
        service = TransferService(db_session)
        transfer = await service.create_transfer(
            TransferCreate(from_warehouse_id=main_id, to_warehouse_id=overflow_id),
            created_by_id=admin_id,
        )

        with pytest.raises(ValidationError):
            await service.validate_transfer(transfer.id, admin_id)

    async def test_list_filters_either_warehouse(self, db_session: AsyncSession):
        admin_id, main_id, overflow_id, _ = await self._setup(db_session)
        service = TransferService(db_session)
        await service.create_transfer(
            TransferCreate(from_warehouse_id=main_id, to_warehouse_id=overflow_id),
            created_by_id=admin_id,
        )

        _, from_total = await service.list_transfers(TransferFilters(warehouse_id=main_id))
        _, to_total = await service.list_transfers(TransferFilters(warehouse_id=overflow_id))

        assert from_total == 1
        assert to_total == 1


class TestTransferEndpoints:
    """Tests for transfer API endpoints."""

    async def test_create_and_cancel(self, client: AsyncClient, db_session: AsyncSession):
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
        main = await client.post("/api/warehouses", json={"name": "Main"}, headers=headers)
        overflow = await client.post("/api/warehouses", json={"name": "Overflow"}, headers=headers)

        response = await client.post(
            "/api/transfers",
            json={
                "from_warehouse_id": main.json()["data"]["id"],
                "to_warehouse_id": overflow.json()["data"]["id"],
            },
            headers=headers,
        )
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["from_warehouse"]["name"] == "Main"
        assert data["to_warehouse"]["name"] == "Overflow"
        assert data["items"] == []

        response = await client.post(f"/api/transfers/{data['id']}/cancel", headers=headers)
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "cancelled"

    async def test_next_number_without_auth(self, client: AsyncClient):
        response = await client.get("/api/transfers/next-number")

        assert response.status_code == 200
        assert response.json() == {"next": f"TRF-{datetime.now().year}-001"}
