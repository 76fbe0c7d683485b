"""
Inventory store module.

Tracks per-owner item slots, allocates item ids and guards mutations.
"""

from .errors import (
    InventoryError,
    InvalidLimits,
    InvalidPrice,
    InvalidQuantity,
    InvalidStatus,
    ItemNotFound,
    ReentrantCall,
)
from .models import Item, Limits
from .store import InventoryStore
from .service import LedgerService

__all__ = [
    "Item",
    "Limits",
    "InventoryStore",
    "LedgerService",
    "InventoryError",
    "InvalidQuantity",
    "InvalidPrice",
    "InvalidStatus",
    "ItemNotFound",
    "InvalidLimits",
    "ReentrantCall",
]
