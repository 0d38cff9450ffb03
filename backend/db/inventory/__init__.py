"""
Site inventory.

Models:
- InventoryItem (catalogue entry: name, category, unit)
- InventoryTransaction (append-only in/out/adjustment log per site; carries
  previous_stock/new_stock so the latest row is the current stock)
"""

from .item import InventoryItem
from .transaction import InventoryTransaction

__all__ = ["InventoryItem", "InventoryTransaction"]
