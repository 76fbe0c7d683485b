"""
Per-owner inventory store.

Each owner gets its own id space: ids are handed out 0, 1, 2, ... and are
never reissued, even after the item is removed. Removed slots stay
allocated and read back as the zero Item.
"""

import logging
import time
from typing import Callable, List, Optional

from ..events import EventEmitter, ItemAdded, ItemRemoved, ItemUpdated
from .backends import MemoryBackend, SlotBackend
from .errors import InvalidLimits, InvalidPrice, InvalidQuantity, InvalidStatus, ItemNotFound
from .guard import MutationGuard
from .models import DEFAULT_MAX_PRICE, DEFAULT_MAX_QUANTITY, STATUS_AVAILABLE, Item, Limits

logger = logging.getLogger(__name__)


def unix_now() -> int:
    """Current time in whole seconds."""
    return int(time.time())


class InventoryStore:
    """
    Inventory ledger keyed by owner principal and item id.
    
    Mutating operations (add_item, update_item, remove_item) validate
    everything up front, perform a single backend write and then notify the
    emitter, all while holding the store's MutationGuard. Reads take no
    guard.
    """

    def __init__(
        self,
        backend: Optional[SlotBackend] = None,
        emitter: Optional[EventEmitter] = None,
        default_limits: Optional[Limits] = None,
        clock: Callable[[], int] = unix_now,
    ):
        """
        Initialize inventory store.
        
        Args:
            backend: Slot storage (defaults to a fresh MemoryBackend)
            emitter: Event emitter for notifications (defaults to one with no subscribers)
            default_limits: Limits to install when the backend has none persisted
            clock: Returns the current time as an integer
        """
        self.backend = backend if backend is not None else MemoryBackend()
        self.emitter = emitter if emitter is not None else EventEmitter()
        self.clock = clock
        self._guard = MutationGuard()

        if self.backend.get_limits() is None:
            limits = default_limits or Limits(
                max_quantity=DEFAULT_MAX_QUANTITY, max_price=DEFAULT_MAX_PRICE
            )
            self.set_limits(limits.max_quantity, limits.max_price)
            logger.info(
                f"Installed default limits: max_quantity={limits.max_quantity}, "
                f"max_price={limits.max_price}"
            )

    @property
    def limits(self) -> Limits:
        return self.backend.get_limits()

    @property
    def max_quantity(self) -> int:
        return self.limits.max_quantity

    @property
    def max_price(self) -> int:
        return self.limits.max_price

    @property
    def locked(self) -> bool:
        """True while a mutating operation is in progress."""
        return self._guard.locked

    def item_count(self, owner: str) -> int:
        """Number of ids ever allocated to owner, removed ones included."""
        return self.backend.item_count(owner)

    def add_item(self, owner: str, name: str, quantity: int, price: int) -> int:
        """
        Add an item to the owner's inventory.
        
        Args:
            owner: Verified caller principal
            name: Item name
            quantity: Initial quantity, 0 < quantity <= max_quantity
            price: Price, 0 < price <= max_price
            
        Returns:
            The newly allocated item id
            
        Raises:
            InvalidQuantity, InvalidPrice, ReentrantCall
        """
        with self._guard.hold("add_item"):
            limits = self.limits
            if quantity <= 0 or quantity > limits.max_quantity:
                raise InvalidQuantity(
                    f"Quantity {quantity} must be between 1 and {limits.max_quantity}"
                )
            if price <= 0 or price > limits.max_price:
                raise InvalidPrice(f"Price {price} must be between 1 and {limits.max_price}")

            item = Item(
                name=name,
                quantity=quantity,
                status=STATUS_AVAILABLE,
                price=price,
                timestamp=self._timestamp(),
            )
            item_id = self.backend.append_slot(owner, item)
            logger.info(f"Added item {item_id} '{name}' for {owner} (qty={quantity}, price={price})")

            self.emitter.emit(
                ItemAdded(owner=owner, item_id=item_id, name=name, quantity=quantity, price=price)
            )
            return item_id

    def update_item(self, owner: str, item_id: int, quantity: int, status: str) -> None:
        """
        Overwrite quantity and status of a live item.
        
        Zero quantity is accepted here. Name and price never change, and the
        price is not re-checked against the current bound.
        
        Raises:
            ItemNotFound, InvalidQuantity, InvalidStatus, ReentrantCall
        """
        with self._guard.hold("update_item"):
            current = self._live_slot(owner, item_id)

            limits = self.limits
            if quantity < 0 or quantity > limits.max_quantity:
                raise InvalidQuantity(
                    f"Quantity {quantity} must be between 0 and {limits.max_quantity}"
                )
            if not status:
                raise InvalidStatus("Status must not be empty")

            updated = current.model_copy(
                update={"quantity": quantity, "status": status, "timestamp": self._timestamp()}
            )
            self.backend.put_slot(owner, item_id, updated)
            logger.info(f"Updated item {item_id} for {owner} (qty={quantity}, status={status})")

            self.emitter.emit(
                ItemUpdated(owner=owner, item_id=item_id, quantity=quantity, status=status)
            )

    def remove_item(self, owner: str, item_id: int) -> None:
        """
        Tombstone a live item. The id stays allocated and is never reused.
        
        Raises:
            ItemNotFound, ReentrantCall
        """
        with self._guard.hold("remove_item"):
            self._live_slot(owner, item_id)

            self.backend.clear_slot(owner, item_id)
            logger.info(f"Removed item {item_id} for {owner}")

            self.emitter.emit(ItemRemoved(owner=owner, item_id=item_id))

    def list_items(self, owner: str) -> List[Item]:
        """
        Every allocated slot of owner in id order.
        
        Removed slots appear as zero Items; callers check ``is_live`` (or a
        zero timestamp) to skip them.
        """
        return [
            slot if slot is not None else Item.tombstone()
            for slot in self.backend.list_slots(owner)
        ]

    def get_item(self, owner: str, item_id: int) -> Item:
        """
        Read one slot of any owner.
        
        Only the allocation count is checked, so a removed slot returns the
        zero Item instead of failing.
        
        Raises:
            ItemNotFound: if item_id was never allocated to owner
        """
        if item_id < 0 or item_id >= self.backend.item_count(owner):
            raise ItemNotFound(owner, item_id)

        slot = self.backend.get_slot(owner, item_id)
        return slot if slot is not None else Item.tombstone()

    def set_limits(self, max_quantity: int, max_price: int) -> Limits:
        """
        Replace the global bounds for all owners.
        
        Existing items are not re-validated. There is no access control on
        this operation.
        
        Raises:
            InvalidLimits: if either bound is not strictly positive or does not
                fit the backend
        """
        if max_quantity <= 0 or max_price <= 0:
            raise InvalidLimits(
                f"Limits must be positive (max_quantity={max_quantity}, max_price={max_price})"
            )
        if not (self._fits(max_quantity) and self._fits(max_price)):
            raise InvalidLimits(
                f"Limits exceed the storage maximum of {self.backend.max_integer}"
            )

        limits = Limits(max_quantity=max_quantity, max_price=max_price)
        self.backend.set_limits(limits)
        logger.info(f"Limits set: max_quantity={max_quantity}, max_price={max_price}")
        return limits

    def _live_slot(self, owner: str, item_id: int) -> Item:
        """Return the live item in the slot or raise ItemNotFound."""
        if item_id < 0 or not self._fits(item_id):
            raise ItemNotFound(owner, item_id)

        slot = self.backend.get_slot(owner, item_id)
        if slot is None:
            raise ItemNotFound(owner, item_id)
        return slot

    def _fits(self, value: int) -> bool:
        """True if the backend can store value."""
        return self.backend.max_integer is None or value <= self.backend.max_integer

    def _timestamp(self) -> int:
        """
        Current time for a write.
        
        Zero is reserved for removed slots, so the clock must be positive.
        """
        timestamp = self.clock()
        if timestamp <= 0:
            raise ValueError(f"Clock returned {timestamp}, timestamps must be positive")
        return timestamp
