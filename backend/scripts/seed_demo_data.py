import asyncio
import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

"""
Seed demo data (workers, sites, inventory, purchasing) into the Postgres DB.

This script can be run from either:
- backend/: `python scripts/seed_demo_data.py`
- repo root: `python backend/scripts/seed_demo_data.py`
"""

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import func, select

from db.database import (
    async_session_maker,
    create_db_and_tables,
    AuthorizedPerson,
    InventoryItem,
    InventoryTransaction,
    Material,
    PurchaseOrder,
    PurchaseOrderItem,
    Site,
    User,
    UserSiteAssignment,
    Vendor,
)


async def get_or_create_user(session, phone: str, name: str, role: str = "employee") -> User:
    result = await session.execute(select(User).where(User.phone == phone))
    user = result.scalar_one_or_none()
    if user:
        return user

    user = User(phone=phone, name=name, role=role, is_verified=True)
    session.add(user)
    await session.flush()
    return user


async def get_or_create_site(session, name: str, location: str, status: str = "active") -> Site:
    result = await session.execute(select(Site).where(func.lower(Site.name) == name.strip().lower()))
    site = result.scalar_one_or_none()
    if site:
        return site

    site = Site(name=name.strip(), location=location, status=status)
    session.add(site)
    await session.flush()
    return site


async def ensure_assignment(session, user: User, site: Site, role: str) -> None:
    result = await session.execute(
        select(UserSiteAssignment).where(
            UserSiteAssignment.user_id == user.id,
            UserSiteAssignment.site_id == site.id,
        )
    )
    if result.scalar_one_or_none():
        return
    session.add(UserSiteAssignment(user_id=user.id, site_id=site.id, role=role))
    await session.flush()


async def get_or_create_item(session, name: str, category: str, unit: str, code: str) -> InventoryItem:
    result = await session.execute(select(InventoryItem).where(InventoryItem.item_code == code))
    item = result.scalar_one_or_none()
    if item:
        return item

    item = InventoryItem(name=name, category=category, unit=unit, item_code=code)
    session.add(item)
    await session.flush()
    return item


async def record_movements(session, site: Site, item: InventoryItem, movements: list) -> int:
    """Append (type, quantity) rows unless the site already has history for the item."""
    result = await session.execute(
        select(func.count())
        .select_from(InventoryTransaction)
        .where(InventoryTransaction.site_id == site.id, InventoryTransaction.item_id == item.id)
    )
    if int(result.scalar_one() or 0) > 0:
        return 0

    stock = 0.0
    start = datetime.now(timezone.utc) - timedelta(days=len(movements))
    for idx, (tx_type, qty) in enumerate(movements):
        previous = stock
        if tx_type == "in":
            stock = previous + qty
        elif tx_type == "out":
            stock = previous - qty
        else:
            stock = qty
        session.add(
            InventoryTransaction(
                item_id=item.id,
                site_id=site.id,
                transaction_type=tx_type,
                quantity=qty,
                previous_stock=previous,
                new_stock=stock,
                created_at=start + timedelta(days=idx),
            )
        )
    await session.flush()
    return len(movements)


async def seed():
    await create_db_and_tables()

    async with async_session_maker() as session:
        async with session.begin():
            supervisor = await get_or_create_user(session, "+919800000001", "Ramesh Patel", "supervisor")
            mason = await get_or_create_user(session, "+919800000002", "Suresh Kumar")
            electrician = await get_or_create_user(session, "+919800000003", "Anil Shah")

            tower = await get_or_create_site(session, "Shivalik Tower", "Ahmedabad, SG Highway")
            villas = await get_or_create_site(session, "Riverfront Villas", "Gandhinagar", "planning")

            await ensure_assignment(session, supervisor, tower, "supervisor")
            await ensure_assignment(session, mason, tower, "employee")
            await ensure_assignment(session, electrician, villas, "employee")

            cement = await get_or_create_item(session, "Cement (OPC 53)", "Civil", "bag", "CIV-001")
            steel = await get_or_create_item(session, "TMT Bar 12mm", "Steel", "kg", "STL-012")
            wire = await get_or_create_item(session, "Copper Wire 2.5mm", "Electrical", "m", "ELE-025")

            tx_count = 0
            tx_count += await record_movements(session, tower, cement, [("in", 200), ("out", 45), ("out", 30)])
            tx_count += await record_movements(session, tower, steel, [("in", 1500), ("adjustment", 1420)])
            tx_count += await record_movements(session, villas, wire, [("in", 500), ("out", 120)])

            result = await session.execute(select(Vendor).where(func.lower(Vendor.name) == "gujarat building supplies"))
            vendor = result.scalar_one_or_none()
            if not vendor:
                vendor = Vendor(
                    name="Gujarat Building Supplies",
                    contact_person="Mahesh Desai",
                    phone="+919812345678",
                    address="Naroda GIDC, Ahmedabad",
                    gst_number="24AAACG1234F1Z5",
                    material_groups=["Civil", "Steel"],
                )
                session.add(vendor)
                await session.flush()

            result = await session.execute(select(Material).where(Material.code == "MAT-CEM-53"))
            material = result.scalar_one_or_none()
            if not material:
                material = Material(code="MAT-CEM-53", name="Cement OPC 53", unit="bag", material_group="Civil")
                session.add(material)
                await session.flush()

            result = await session.execute(select(AuthorizedPerson).where(AuthorizedPerson.phone == "+919800000009"))
            signatory = result.scalar_one_or_none()
            if not signatory:
                signatory = AuthorizedPerson(name="Kiran Mehta", phone="+919800000009", position="Project Manager")
                session.add(signatory)
                await session.flush()

            result = await session.execute(select(PurchaseOrder).where(PurchaseOrder.po_number == "PO-DEMO-0001"))
            if not result.scalar_one_or_none():
                line = PurchaseOrderItem(material_id=material.id, item_order=1, quantity=100, rate=385.0, total=38500.0)
                session.add(
                    PurchaseOrder(
                        po_number="PO-DEMO-0001",
                        po_date=date.today(),
                        vendor_id=vendor.id,
                        created_by=supervisor.id,
                        contact_person_id=signatory.id,
                        ordered_by_id=signatory.id,
                        total_amount=line.total,
                        items=[line],
                    )
                )

    print(f"[seed_demo_data] sites=2 users=3 transactions_added={tx_count}")


if __name__ == "__main__":
    asyncio.run(seed())
