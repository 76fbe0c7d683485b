"""
Slot storage backends for the inventory store.

A backend persists three things: the per-owner item slots, the per-owner
id counters and the global limits. Each write method is atomic on its own;
the store performs all validation before calling one.
"""

import logging
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from .models import Item, Limits

logger = logging.getLogger(__name__)


class SlotBackend(ABC):
    """Storage contract used by InventoryStore."""

    # Largest integer the backend can store, None for unbounded
    max_integer: Optional[int] = None

    @abstractmethod
    def item_count(self, owner: str) -> int:
        """Number of ids ever allocated to owner."""

    @abstractmethod
    def get_slot(self, owner: str, item_id: int) -> Optional[Item]:
        """Live item in the slot, or None if never allocated or removed."""

    @abstractmethod
    def list_slots(self, owner: str) -> List[Optional[Item]]:
        """All allocated slots for owner in id order, None for removed ones."""

    @abstractmethod
    def append_slot(self, owner: str, item: Item) -> int:
        """Store item under the owner's next id, bump the counter, return the id."""

    @abstractmethod
    def put_slot(self, owner: str, item_id: int, item: Item) -> None:
        """Overwrite an allocated slot."""

    @abstractmethod
    def clear_slot(self, owner: str, item_id: int) -> None:
        """Tombstone an allocated slot. The id stays allocated."""

    @abstractmethod
    def get_limits(self) -> Optional[Limits]:
        """Persisted limits, or None if never set."""

    @abstractmethod
    def set_limits(self, limits: Limits) -> None:
        """Persist new limits."""


class MemoryBackend(SlotBackend):
    """
    Process-local backend keeping everything in dictionaries.
    
    Used for tests and for API servers started without a database path.
    """

    def __init__(self):
        self._slots: Dict[str, Dict[int, Optional[Item]]] = {}
        self._counts: Dict[str, int] = {}
        self._limits: Optional[Limits] = None

    def item_count(self, owner: str) -> int:
        return self._counts.get(owner, 0)

    def get_slot(self, owner: str, item_id: int) -> Optional[Item]:
        item = self._slots.get(owner, {}).get(item_id)
        return item.model_copy() if item is not None else None

    def list_slots(self, owner: str) -> List[Optional[Item]]:
        slots = self._slots.get(owner, {})
        result = []
        for item_id in range(self.item_count(owner)):
            item = slots.get(item_id)
            result.append(item.model_copy() if item is not None else None)
        return result

    def append_slot(self, owner: str, item: Item) -> int:
        item_id = self.item_count(owner)
        self._slots.setdefault(owner, {})[item_id] = item.model_copy()
        self._counts[owner] = item_id + 1
        return item_id

    def put_slot(self, owner: str, item_id: int, item: Item) -> None:
        self._slots.setdefault(owner, {})[item_id] = item.model_copy()

    def clear_slot(self, owner: str, item_id: int) -> None:
        self._slots.setdefault(owner, {})[item_id] = None

    def get_limits(self) -> Optional[Limits]:
        return self._limits

    def set_limits(self, limits: Limits) -> None:
        self._limits = limits


class SQLiteBackend(SlotBackend):
    """
    Persistent slot storage using SQLite.
    
    Tables:
        items        one row per allocated slot, removed=1 for tombstones
        item_counts  next id to allocate per owner
        limits       single row holding the global bounds
    """

    max_integer = 2**63 - 1

    def __init__(self, db_path: str = "/data/ledger.db"):
        """
        Initialize SQLite backend.
        
        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection and run the block as one transaction."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _init_db(self) -> None:
        """Initialize database schema."""
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS items (
                    owner TEXT NOT NULL,
                    item_id INTEGER NOT NULL,
                    name TEXT NOT NULL DEFAULT '',
                    quantity INTEGER NOT NULL DEFAULT 0,
                    status TEXT NOT NULL DEFAULT '',
                    price INTEGER NOT NULL DEFAULT 0,
                    timestamp INTEGER NOT NULL DEFAULT 0,
                    removed INTEGER NOT NULL DEFAULT 0,
                    PRIMARY KEY (owner, item_id)
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS item_counts (
                    owner TEXT PRIMARY KEY,
                    next_id INTEGER NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS limits (
                    id INTEGER PRIMARY KEY CHECK (id = 1),
                    max_quantity INTEGER NOT NULL,
                    max_price INTEGER NOT NULL
                )
            """)

        logger.info(f"Initialized ledger database at {self.db_path}")

    def item_count(self, owner: str) -> int:
        with self._connect() as conn:
            return self._item_count(conn, owner)

    def _item_count(self, conn: sqlite3.Connection, owner: str) -> int:
        row = conn.execute(
            "SELECT next_id FROM item_counts WHERE owner = ?", (owner,)
        ).fetchone()
        return row["next_id"] if row else 0

    def get_slot(self, owner: str, item_id: int) -> Optional[Item]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM items WHERE owner = ? AND item_id = ?",
                (owner, item_id),
            ).fetchone()

        if not row:
            return None
        return self._row_to_item(row)

    def list_slots(self, owner: str) -> List[Optional[Item]]:
        with self._connect() as conn:
            count = self._item_count(conn, owner)
            rows = conn.execute(
                "SELECT * FROM items WHERE owner = ? ORDER BY item_id", (owner,)
            ).fetchall()

        by_id = {row["item_id"]: self._row_to_item(row) for row in rows}
        return [by_id.get(item_id) for item_id in range(count)]

    def append_slot(self, owner: str, item: Item) -> int:
        with self._connect() as conn:
            # Take the write lock before reading the counter
            conn.execute("BEGIN IMMEDIATE")
            item_id = self._item_count(conn, owner)
            conn.execute(
                """
                INSERT INTO items (owner, item_id, name, quantity, status, price, timestamp)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (owner, item_id, item.name, item.quantity, item.status, item.price, item.timestamp),
            )
            conn.execute(
                """
                INSERT INTO item_counts (owner, next_id) VALUES (?, ?)
                ON CONFLICT(owner) DO UPDATE SET next_id = excluded.next_id
                """,
                (owner, item_id + 1),
            )

        logger.debug(f"Stored item {item_id} for {owner}")
        return item_id

    def put_slot(self, owner: str, item_id: int, item: Item) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO items (
                    owner, item_id, name, quantity, status, price, timestamp, removed
                ) VALUES (?, ?, ?, ?, ?, ?, ?, 0)
                """,
                (owner, item_id, item.name, item.quantity, item.status, item.price, item.timestamp),
            )

    def clear_slot(self, owner: str, item_id: int) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO items (owner, item_id, removed)
                VALUES (?, ?, 1)
                """,
                (owner, item_id),
            )

    def get_limits(self) -> Optional[Limits]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT max_quantity, max_price FROM limits WHERE id = 1"
            ).fetchone()

        if not row:
            return None
        return Limits(max_quantity=row["max_quantity"], max_price=row["max_price"])

    def set_limits(self, limits: Limits) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO limits (id, max_quantity, max_price) VALUES (1, ?, ?)",
                (limits.max_quantity, limits.max_price),
            )

    def _row_to_item(self, row: sqlite3.Row) -> Optional[Item]:
        """Convert database row to Item, None for a tombstone."""
        if row["removed"]:
            return None
        return Item(
            name=row["name"],
            quantity=row["quantity"],
            status=row["status"],
            price=row["price"],
            timestamp=row["timestamp"],
        )


def read_limits_readonly(db_path: str) -> Optional[Limits]:
    """
    Read persisted limits without creating or modifying anything.
    
    Args:
        db_path: Path to an existing SQLite database file
        
    Returns:
        Persisted limits, or None if the limits row is missing
        
    Raises:
        sqlite3.OperationalError: if the file is not a ledger database
    """
    uri = f"{Path(db_path).resolve().as_uri()}?mode=ro"
    conn = sqlite3.connect(uri, uri=True)
    try:
        row = conn.execute("SELECT max_quantity, max_price FROM limits WHERE id = 1").fetchone()
    finally:
        conn.close()

    if not row:
        return None
    return Limits(max_quantity=row[0], max_price=row[1])
