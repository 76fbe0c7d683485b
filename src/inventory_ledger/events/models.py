"""
Notification models emitted by the inventory store.

Events fire only after a write has been committed, never for a failed
operation.
"""

from enum import Enum

from pydantic import BaseModel, Field


class InventoryEventType(str, Enum):
    """Types of inventory notifications."""

    ITEM_ADDED = "item_added"
    ITEM_UPDATED = "item_updated"
    ITEM_REMOVED = "item_removed"


class InventoryEvent(BaseModel):
    """Common fields of every inventory notification."""

    event_type: InventoryEventType
    owner: str = Field(..., description="Principal whose inventory changed")
    item_id: int = Field(..., ge=0, description="Slot id within the owner's inventory")

    def summary(self) -> str:
        """
        One-line summary suitable for logging.
        """
        parts = [f"{self.event_type.value}:", f"owner={self.owner}", f"item={self.item_id}"]
        for key, value in self.model_dump(exclude={"event_type", "owner", "item_id"}).items():
            parts.append(f"{key}={value}")
        return " ".join(parts)


class ItemAdded(InventoryEvent):
    """A new item was stored under a freshly allocated id."""

    event_type: InventoryEventType = InventoryEventType.ITEM_ADDED
    name: str
    quantity: int
    price: int


class ItemUpdated(InventoryEvent):
    """An item's quantity and status were overwritten."""

    event_type: InventoryEventType = InventoryEventType.ITEM_UPDATED
    quantity: int
    status: str


class ItemRemoved(InventoryEvent):
    """An item slot was tombstoned."""

    event_type: InventoryEventType = InventoryEventType.ITEM_REMOVED
