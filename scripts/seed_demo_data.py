#!/usr/bin/env python3
"""
Seed the database with demo warehouse data.

Creates users for each role, two warehouses, a small product catalogue and
opening-balance adjustments (numbered through the regular allocator, so the
next adjustment number continues from them).

Usage:
    python scripts/seed_demo_data.py --dry-run   # roll back at the end
    python scripts/seed_demo_data.py --confirm   # commit

Requires: migrations applied (alembic upgrade head), database reachable.
"""

import asyncio
import sys
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.models import User, UserRole
from src.core.auth.password import hash_password
from src.core.config import settings
from src.core.database.session import async_session
from src.core.documents import DocumentKind, DocumentNumberService, DocumentStatus
from src.modules.adjustments.models import Adjustment
from src.modules.inventory.models import MovementType, Product
from src.modules.inventory.service import InventoryService
from src.modules.warehouses.models import Warehouse

DEMO_PASSWORD = "demo1234"

USERS_DATA = [
    ("admin@warehouse.demo", "Site Admin", UserRole.ADMIN),
    ("manager@warehouse.demo", "Shift Manager", UserRole.MANAGER),
    ("operator@warehouse.demo", "Forklift Operator", UserRole.OPERATOR),
]

WAREHOUSES_DATA = [
    ("Main Warehouse", "WH-MAIN", "Industrial Area, Block 4"),
    ("Overflow Store", "WH-OVF", "Industrial Area, Block 9"),
]

# name, sku, unit, cost, price, opening quantity in the main warehouse
PRODUCTS_DATA = [
    ("Pallet wrap 500mm", "PW-500", "roll", Decimal("4.20"), Decimal("6.50"), 120),
    ("Carton 40x30x30", "CT-403030", "unit", Decimal("0.85"), Decimal("1.40"), 800),
    ("Packing tape brown", "TP-BRN", "roll", Decimal("1.10"), Decimal("1.90"), 300),
    ("Shipping label A6", "LB-A6", "pack", Decimal("3.00"), Decimal("4.75"), 60),
]


async def seed_users(session: AsyncSession) -> dict[str, int]:
    """Create one user per role. Returns ids keyed by role."""
    existing = (await session.execute(select(User))).scalars().all()
    if existing:
        print("  Users already exist, skip.")
        return {u.role: u.id for u in existing}

    pw = hash_password(DEMO_PASSWORD)
    users = [
        User(email=email, password_hash=pw, full_name=name, role=role.value, is_active=True)
        for email, name, role in USERS_DATA
    ]
    session.add_all(users)
    await session.flush()
    print(f"  Created {len(users)} users.")
    return {u.role: u.id for u in users}


async def seed_warehouses(session: AsyncSession) -> list[int]:
    existing = (await session.execute(select(Warehouse).order_by(Warehouse.id))).scalars().all()
    if existing:
        print("  Warehouses already exist, skip.")
        return [w.id for w in existing]

    warehouses = [
        Warehouse(name=name, code=code, location=location, is_active=True)
        for name, code, location in WAREHOUSES_DATA
    ]
    session.add_all(warehouses)
    await session.flush()
    print(f"  Created {len(warehouses)} warehouses.")
    return [w.id for w in warehouses]


async def seed_products_and_stock(
    session: AsyncSession, warehouse_id: int, user_id: int
) -> None:
    """Create products and book their opening balance as adjustments."""
    if await session.scalar(select(Product.id).limit(1)):
        print("  Products already exist, skip.")
        return

    inventory = InventoryService(session)
    numbers = DocumentNumberService(session)
    now = datetime.now(timezone.utc)

    for name, sku, unit, cost, price, quantity in PRODUCTS_DATA:
        product = Product(
            name=name,
            sku=sku,
            unit_of_measure=unit,
            cost_price=cost,
            selling_price=price,
            is_active=True,
        )
        session.add(product)
        await session.flush()

        def build(number: str, product_id: int = product.id, quantity: int = quantity) -> Adjustment:
            return Adjustment(
                adjustment_number=number,
                warehouse_id=warehouse_id,
                product_id=product_id,
                system_quantity=0,
                counted_quantity=quantity,
                difference=quantity,
                notes="Opening balance (demo)",
                status=DocumentStatus.DONE.value,
                created_by_id=user_id,
                validated_at=now,
            )

        adjustment = await numbers.insert_with_number(DocumentKind.ADJUSTMENT, build)
        await inventory.apply_movement(
            product_id=product.id,
            warehouse_id=warehouse_id,
            quantity_delta=quantity,
            movement_type=MovementType.ADJUSTMENT,
            created_by_id=user_id,
            reference_type="adjustment",
            reference_id=adjustment.id,
            notes=f"Adjustment {adjustment.adjustment_number}",
        )
        print(f"  {adjustment.adjustment_number}: {name} +{quantity}")

    print(f"  Created {len(PRODUCTS_DATA)} products with opening stock.")


async def run_seed(session: AsyncSession, dry_run: bool) -> None:
    user_ids = await seed_users(session)
    admin_id = user_ids.get(UserRole.ADMIN.value) or next(iter(user_ids.values()))
    warehouse_ids = await seed_warehouses(session)
    await seed_products_and_stock(session, warehouse_ids[0], admin_id)

    if dry_run:
        await session.rollback()
        print("\n[DRY-RUN] Rolled back, no data written.")
    else:
        await session.commit()
        print("\nSeed completed successfully.")


async def main() -> None:
    import argparse
    parser = argparse.ArgumentParser(description="Seed database with demo warehouse data")
    parser.add_argument("--dry-run", action="store_true", help="Do not commit")
    parser.add_argument("--confirm", action="store_true", help="Commit changes")
    args = parser.parse_args()
    if not args.dry_run and not args.confirm:
        print("Use --dry-run or --confirm")
        sys.exit(1)

    print("Database:", settings.database_url.split("@")[-1] if "@" in settings.database_url else "?")
    print("Mode:", "DRY-RUN" if args.dry_run else "CONFIRM")
    async with async_session() as session:
        await run_seed(session, dry_run=args.dry_run)
    print("Done.")


if __name__ == "__main__":
    asyncio.run(main())
