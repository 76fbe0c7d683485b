"""
Events package for item notifications and their dispatch to observers.
"""

from .models import InventoryEvent, InventoryEventType, ItemAdded, ItemRemoved, ItemUpdated
from .emitter import EventEmitter, log_event

__all__ = [
    "InventoryEvent",
    "InventoryEventType",
    "ItemAdded",
    "ItemUpdated",
    "ItemRemoved",
    "EventEmitter",
    "log_event",
]
