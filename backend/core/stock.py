"""
Current stock per item at a site, derived from the inventory transaction log.

The log is append-only and every row carries the resulting `new_stock`, so the
current stock of an item is the `new_stock` of its most recent row. The
database does this with DISTINCT ON where available; `summarize_stock` is the
same computation done in Python over rows already sorted newest-first.
"""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Iterable, Optional


@dataclass(frozen=True)
class StockSummary:
    item_id: Any
    item_name: Optional[str]
    item_category: Optional[str]
    item_unit: Optional[str]
    current_stock: float
    last_updated: Any

    def as_dict(self) -> dict:
        return asdict(self)


def _field(row: Any, name: str, default: Any = None) -> Any:
    if isinstance(row, dict):
        return row.get(name, default)
    return getattr(row, name, default)


def _joined_item(row: Any) -> Any:
    # ORM rows expose `item`; API payloads may use `item` or `inventory_items`
    item = _field(row, "item")
    if item is None:
        item = _field(row, "inventory_items")
    return item


def summarize_stock(transactions: Iterable[Any]) -> dict:
    """
    Map item_id -> StockSummary using the first row seen for each item.

    `transactions` must already be sorted newest-first; the returned dict keeps
    first-seen order.
    """
    out: dict = {}
    for tx in transactions:
        item_id = _field(tx, "item_id")
        if item_id in out:
            continue
        item = _joined_item(tx)
        out[item_id] = StockSummary(
            item_id=item_id,
            item_name=_field(item, "name") if item is not None else None,
            item_category=_field(item, "category") if item is not None else None,
            item_unit=_field(item, "unit") if item is not None else None,
            current_stock=float(_field(tx, "new_stock") or 0),
            last_updated=_field(tx, "created_at"),
        )
    return out


def _sort_key(row: Any) -> tuple:
    created_at = _field(row, "created_at")
    if isinstance(created_at, str):
        created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
    if isinstance(created_at, datetime) and created_at.tzinfo is not None:
        created_at = created_at.replace(tzinfo=None) - created_at.utcoffset()
    return (created_at is not None, created_at or datetime.min, str(_field(row, "id") or ""))


def sort_newest_first(transactions: Iterable[Any]) -> list:
    """Order rows by (created_at, id) descending; rows without a timestamp go last."""
    return sorted(transactions, key=_sort_key, reverse=True)
