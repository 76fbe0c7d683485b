"""
Dispatch of inventory notifications to subscribed observers.
"""

import logging
from typing import Callable, List, Optional

from .models import InventoryEvent

logger = logging.getLogger(__name__)

Subscriber = Callable[[InventoryEvent], None]


def log_event(event: InventoryEvent) -> None:
    """Subscriber that writes every event to the log."""
    logger.info(f"Inventory event: {event.summary()}")


class EventEmitter:
    """
    Fans inventory events out to every subscriber.
    
    Usage:
        emitter = EventEmitter()
        emitter.subscribe(received.append)
        
        store = InventoryStore(emitter=emitter)
        store.add_item("0xabc", "widget", 10, 5)   # received == [ItemAdded(...)]
    
    Subscribers run synchronously, in subscription order. A subscriber that
    raises is logged and skipped; the remaining subscribers still receive
    the event.
    """

    def __init__(self, subscribers: Optional[List[Subscriber]] = None):
        """
        Initialize event emitter.
        
        Args:
            subscribers: Optional initial subscribers
        """
        self.subscribers: List[Subscriber] = list(subscribers or [])

    def subscribe(self, subscriber: Subscriber) -> None:
        """Register a subscriber (no-op if already registered)."""
        if subscriber not in self.subscribers:
            self.subscribers.append(subscriber)

    def unsubscribe(self, subscriber: Subscriber) -> None:
        """Remove a subscriber if present."""
        if subscriber in self.subscribers:
            self.subscribers.remove(subscriber)

    def emit(self, event: InventoryEvent) -> int:
        """
        Deliver an event to all subscribers.
        
        Args:
            event: Event to deliver
            
        Returns:
            Number of subscribers that handled the event without raising
        """
        delivered = 0

        for subscriber in list(self.subscribers):
            try:
                subscriber(event)
                delivered += 1
            except Exception as e:
                logger.error(
                    f"Subscriber {getattr(subscriber, '__name__', subscriber)!r} "
                    f"failed on {event.event_type.value}: {e}",
                    exc_info=True,
                )

        logger.debug(f"Emitted event to {delivered}/{len(self.subscribers)} subscribers: {event.summary()}")
        return delivered
