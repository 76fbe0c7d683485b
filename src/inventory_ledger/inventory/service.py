"""
Caller-facing ledger service.

Binds every mutating operation to the verified caller principal supplied
by the boundary layer (HTTP header, CLI flag) and serializes incoming calls
so that concurrent requests queue instead of tripping the store's guard.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, List, Optional

from ..config import LedgerConfig, get_config
from ..events import EventEmitter, log_event
from .backends import MemoryBackend, SlotBackend, SQLiteBackend
from .errors import InventoryError
from .models import Item, Limits
from .store import InventoryStore

logger = logging.getLogger(__name__)


class LedgerService:
    """
    Boundary facade over an InventoryStore.
    
    The owner of every write is the caller; there is no way to write into
    another owner's inventory. Reads of a specific item are public.
    """

    def __init__(self, store: InventoryStore):
        self.store = store
        # Re-entrant so same-thread re-entry still reaches the store guard.
        self._serial = threading.RLock()

    @contextmanager
    def _call(self, operation: str, caller: Optional[str] = None) -> Iterator[None]:
        with self._serial:
            try:
                yield
            except InventoryError as e:
                logger.warning(f"{operation} rejected for {caller or 'anonymous'}: [{e.code}] {e}")
                raise

    def add_item(self, caller: str, name: str, quantity: int, price: int) -> int:
        with self._call("add_item", caller):
            return self.store.add_item(caller, name, quantity, price)

    def update_item(self, caller: str, item_id: int, quantity: int, status: str) -> Item:
        """Update one of the caller's items and return it as committed."""
        with self._call("update_item", caller):
            self.store.update_item(caller, item_id, quantity, status)
            return self.store.get_item(caller, item_id)

    def remove_item(self, caller: str, item_id: int) -> None:
        with self._call("remove_item", caller):
            self.store.remove_item(caller, item_id)

    def get_inventory(self, caller: str) -> List[Item]:
        """Full slot list of the caller, removed slots included."""
        logger.debug(f"Listing inventory of {caller}")
        return self.store.list_items(caller)

    def get_item(self, owner: str, item_id: int) -> Item:
        """Public read of any owner's slot."""
        logger.debug(f"Reading item {item_id} of {owner}")
        with self._call("get_item", owner):
            return self.store.get_item(owner, item_id)

    def get_limits(self) -> Limits:
        return self.store.limits

    def set_limits(self, max_quantity: int, max_price: int) -> Limits:
        """Replace the global bounds. Not restricted to any caller."""
        with self._call("set_limits"):
            return self.store.set_limits(max_quantity, max_price)


def create_backend(config: LedgerConfig) -> SlotBackend:
    """SQLite backend when a database path is configured, memory otherwise."""
    if config.db_path:
        return SQLiteBackend(db_path=config.db_path)
    logger.warning("No LEDGER_DB_PATH configured, using in-memory storage")
    return MemoryBackend()


def build_service(
    config: Optional[LedgerConfig] = None,
    backend: Optional[SlotBackend] = None,
    emitter: Optional[EventEmitter] = None,
) -> LedgerService:
    """
    Wire a LedgerService from configuration.
    
    Args:
        config: Configuration (defaults to get_config())
        backend: Storage override (defaults to create_backend(config))
        emitter: Emitter override (defaults to one logging every event)
        
    Returns:
        Ready-to-use LedgerService
    """
    config = config or get_config()
    store = InventoryStore(
        backend=backend if backend is not None else create_backend(config),
        emitter=emitter if emitter is not None else EventEmitter([log_event]),
        default_limits=Limits(max_quantity=config.max_quantity, max_price=config.max_price),
    )
    return LedgerService(store)
