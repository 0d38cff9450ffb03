import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.crud import apply_update, commit_or_fail, delete_or_fail, get_or_404
from core.search import filter_rows
from core.stock import sort_newest_first, summarize_stock
from db.database import (
    get_async_session,
    InventoryItem as InventoryItemModel,
    InventoryTransaction as InventoryTransactionModel,
    Site as SiteModel,
)
from schemas.common import MessageResponse
from schemas.inventory import (
    InventoryItemCreate,
    InventoryItemRead,
    InventoryItemUpdate,
    InventoryTransactionCreate,
    InventoryTransactionRead,
    StockSummaryRead,
)

logger = logging.getLogger(__name__)

router = APIRouter()

ITEM_SEARCH_FIELDS = ("name", "category")
TRANSACTION_SEARCH_FIELDS = ("item.name", "item.category", "site.name", "notes")
_TX_JOINS = (selectinload(InventoryTransactionModel.item), selectinload(InventoryTransactionModel.site))
_NEWEST_FIRST = (InventoryTransactionModel.created_at.desc(), InventoryTransactionModel.id.desc())


def _supports_distinct_on(db: AsyncSession) -> bool:
    bind = getattr(db, "bind", None)
    dialect = getattr(bind, "dialect", None)
    return getattr(dialect, "name", None) == "postgresql"


def _next_stock(transaction_type: str, previous: float, quantity: float) -> float:
    if transaction_type == "in":
        return previous + quantity
    if transaction_type == "out":
        return previous - quantity
    # adjustment records a physical count
    return quantity


async def _latest_transaction(db: AsyncSession, site_id: UUID, item_id: UUID) -> Optional[InventoryTransactionModel]:
    res = await db.execute(
        select(InventoryTransactionModel)
        .where(
            InventoryTransactionModel.site_id == site_id,
            InventoryTransactionModel.item_id == item_id,
        )
        .order_by(*_NEWEST_FIRST)
        .limit(1)
    )
    return res.scalar_one_or_none()


# ----------------------------
# Items
# ----------------------------

@router.get("/items", response_model=List[InventoryItemRead])
async def list_inventory_items(
    q: Optional[str] = None,
    item_status: Optional[str] = None,
    db: AsyncSession = Depends(get_async_session),
):
    stmt = select(InventoryItemModel)
    if item_status:
        stmt = stmt.where(InventoryItemModel.status == item_status)
    res = await db.execute(stmt.order_by(InventoryItemModel.created_at.desc(), InventoryItemModel.id.desc()))
    rows = [InventoryItemRead.model_validate(it) for it in res.scalars().all()]
    return filter_rows(rows, q, ITEM_SEARCH_FIELDS)


@router.post("/items", response_model=InventoryItemRead, status_code=status.HTTP_201_CREATED)
async def create_inventory_item(payload: InventoryItemCreate, db: AsyncSession = Depends(get_async_session)):
    m = InventoryItemModel(**payload.model_dump())
    db.add(m)
    await commit_or_fail(db, "inventory", "Failed to create inventory item")
    await db.refresh(m)
    return InventoryItemRead.model_validate(m)


@router.patch("/items/{item_id}", response_model=InventoryItemRead)
async def update_inventory_item(
    item_id: UUID,
    payload: InventoryItemUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    m = await get_or_404(db, InventoryItemModel, item_id, "Inventory item")
    apply_update(m, payload)
    await commit_or_fail(db, "inventory", "Failed to update inventory item")
    await db.refresh(m)
    return InventoryItemRead.model_validate(m)


@router.delete("/items/{item_id}", response_model=MessageResponse)
async def delete_inventory_item(item_id: UUID, db: AsyncSession = Depends(get_async_session)):
    m = await get_or_404(db, InventoryItemModel, item_id, "Inventory item")

    # The transaction log is append-only; items with history are retired, not deleted
    used = await db.execute(
        select(func.count()).select_from(InventoryTransactionModel).where(InventoryTransactionModel.item_id == item_id)
    )
    if int(used.scalar_one() or 0) > 0:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Inventory item has transactions; set its status to discontinued instead",
        )
    return await delete_or_fail(db, m, "inventory", "Inventory item")


# ----------------------------
# Transactions
# ----------------------------

@router.get("/transactions", response_model=List[InventoryTransactionRead])
async def list_inventory_transactions(
    site_id: Optional[UUID] = None,
    item_id: Optional[UUID] = None,
    transaction_type: Optional[str] = None,
    q: Optional[str] = None,
    db: AsyncSession = Depends(get_async_session),
):
    stmt = select(InventoryTransactionModel).options(*_TX_JOINS)
    if site_id:
        stmt = stmt.where(InventoryTransactionModel.site_id == site_id)
    if item_id:
        stmt = stmt.where(InventoryTransactionModel.item_id == item_id)
    if transaction_type:
        stmt = stmt.where(InventoryTransactionModel.transaction_type == transaction_type)
    res = await db.execute(stmt.order_by(*_NEWEST_FIRST))
    rows = [InventoryTransactionRead.model_validate(t) for t in res.scalars().all()]
    return filter_rows(rows, q, TRANSACTION_SEARCH_FIELDS)


@router.post("/transactions", response_model=InventoryTransactionRead, status_code=status.HTTP_201_CREATED)
async def create_inventory_transaction(
    payload: InventoryTransactionCreate,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Append one in/out/adjustment row for an item at a site.

    previous_stock is the new_stock of the latest row for the same (site, item),
    or 0 for the first row.
    """
    await get_or_404(db, InventoryItemModel, payload.item_id, "Inventory item")
    await get_or_404(db, SiteModel, payload.site_id, "Site")

    latest = await _latest_transaction(db, payload.site_id, payload.item_id)
    previous = float(latest.new_stock) if latest else 0.0
    new_stock = _next_stock(payload.transaction_type, previous, float(payload.quantity))
    if new_stock < 0:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Insufficient stock. Available={previous:g} requested={float(payload.quantity):g}",
        )

    m = InventoryTransactionModel(
        item_id=payload.item_id,
        site_id=payload.site_id,
        transaction_type=payload.transaction_type,
        quantity=float(payload.quantity),
        previous_stock=previous,
        new_stock=new_stock,
        notes=payload.notes,
        image_key=payload.image_key,
        created_by=payload.created_by,
        # Set here rather than by the server so rows keep sub-second order
        created_at=datetime.now(timezone.utc),
    )
    db.add(m)
    await commit_or_fail(db, "inventory", "Failed to record inventory transaction")
    logger.info(
        "[inventory] %s %g of %s at %s: %g -> %g",
        payload.transaction_type,
        float(payload.quantity),
        payload.item_id,
        payload.site_id,
        previous,
        new_stock,
    )
    m = await get_or_404(db, InventoryTransactionModel, m.id, "Inventory transaction", options=_TX_JOINS)
    return InventoryTransactionRead.model_validate(m)


# ----------------------------
# Stock summary
# ----------------------------

def _latest_per_item_stmt(site_id: UUID):
    # Postgres DISTINCT ON: keep the newest row per item_id.
    return (
        select(InventoryTransactionModel)
        .options(selectinload(InventoryTransactionModel.item))
        .where(InventoryTransactionModel.site_id == site_id)
        .distinct(InventoryTransactionModel.item_id)
        .order_by(InventoryTransactionModel.item_id, *_NEWEST_FIRST)
    )


async def _latest_per_item_sql(db: AsyncSession, site_id: UUID) -> list:
    res = await db.execute(_latest_per_item_stmt(site_id))
    return sort_newest_first(res.scalars().all())


async def _all_for_site(db: AsyncSession, site_id: UUID) -> list:
    res = await db.execute(
        select(InventoryTransactionModel)
        .options(selectinload(InventoryTransactionModel.item))
        .where(InventoryTransactionModel.site_id == site_id)
        .order_by(*_NEWEST_FIRST)
    )
    return list(res.scalars().all())


@router.get("/sites/{site_id}/stock-summary", response_model=List[StockSummaryRead])
async def site_stock_summary(site_id: UUID, db: AsyncSession = Depends(get_async_session)):
    """Current stock of every item seen at a site, most recently moved first."""
    await get_or_404(db, SiteModel, site_id, "Site")

    if _supports_distinct_on(db):
        rows = await _latest_per_item_sql(db, site_id)
    else:
        logger.debug("[inventory] DISTINCT ON unavailable; summarising site %s in Python", site_id)
        rows = await _all_for_site(db, site_id)

    summary = summarize_stock(rows)
    return [StockSummaryRead(**s.as_dict()) for s in summary.values()]
