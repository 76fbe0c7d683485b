"""
Tests for slot storage backends.
"""

import pytest

from inventory_ledger.inventory import (
    InvalidLimits,
    InvalidPrice,
    InvalidQuantity,
    InventoryStore,
    Item,
    ItemNotFound,
    Limits,
)
from inventory_ledger.inventory.backends import MemoryBackend, SQLiteBackend

OWNER = "0xaa"
NOW = 1_700_000_000


@pytest.fixture(params=["memory", "sqlite"])
def backend(request, tmp_path):
    if request.param == "memory":
        return MemoryBackend()
    return SQLiteBackend(db_path=str(tmp_path / "ledger.db"))


class TestBackendContract:
    """Behaviour shared by every backend."""

    def test_append_allocates_sequential_ids(self, backend):
        item = Item(name="widget", quantity=1, status="available", price=1, timestamp=NOW)
        assert backend.append_slot(OWNER, item) == 0
        assert backend.append_slot(OWNER, item) == 1
        assert backend.item_count(OWNER) == 2

    def test_clear_keeps_allocation(self, backend):
        item = Item(name="widget", quantity=1, status="available", price=1, timestamp=NOW)
        backend.append_slot(OWNER, item)
        backend.clear_slot(OWNER, 0)

        assert backend.get_slot(OWNER, 0) is None
        assert backend.item_count(OWNER) == 1
        assert backend.list_slots(OWNER) == [None]

    def test_put_overwrites(self, backend):
        backend.append_slot(OWNER, Item(name="widget", quantity=1, status="available", price=1, timestamp=NOW))
        backend.put_slot(OWNER, 0, Item(name="widget", quantity=0, status="depleted", price=1, timestamp=NOW + 1))

        assert backend.get_slot(OWNER, 0).status == "depleted"

    def test_limits_round_trip(self, backend):
        assert backend.get_limits() is None
        backend.set_limits(Limits(max_quantity=3, max_price=4))
        assert backend.get_limits() == Limits(max_quantity=3, max_price=4)


class TestSQLitePersistence:
    """Test that state survives reopening the database."""

    def test_state_survives_reopen(self, tmp_path):
        db_path = str(tmp_path / "ledger.db")

        store = InventoryStore(backend=SQLiteBackend(db_path=db_path), clock=lambda: NOW)
        store.add_item(OWNER, "widget", 10, 5)
        store.add_item(OWNER, "gadget", 1, 1)
        store.remove_item(OWNER, 0)
        store.set_limits(max_quantity=20, max_price=30)

        reopened = InventoryStore(
            backend=SQLiteBackend(db_path=db_path),
            default_limits=Limits(max_quantity=1, max_price=1),
        )

        # Persisted limits win over defaults
        assert reopened.limits == Limits(max_quantity=20, max_price=30)
        assert reopened.item_count(OWNER) == 2
        assert reopened.get_item(OWNER, 0) == Item.tombstone()
        assert reopened.get_item(OWNER, 1).name == "gadget"
        assert reopened.add_item(OWNER, "bolt", 1, 1) == 2

    def test_creates_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "ledger.db"
        SQLiteBackend(db_path=str(db_path))
        assert db_path.exists()


SQLITE_MAX = 2**63 - 1


class TestSQLiteIntegerRange:
    """Test values beyond SQLite's 64-bit INTEGER range."""

    @pytest.fixture
    def store(self, tmp_path):
        return InventoryStore(
            backend=SQLiteBackend(db_path=str(tmp_path / "ledger.db")),
            default_limits=Limits(max_quantity=100, max_price=1000),
            clock=lambda: NOW,
        )

    def test_huge_item_id_is_not_found(self, store):
        store.add_item(OWNER, "widget", 1, 1)

        with pytest.raises(ItemNotFound):
            store.update_item(OWNER, 2**64, 1, "reserved")
        with pytest.raises(ItemNotFound):
            store.remove_item(OWNER, 2**64)
        with pytest.raises(ItemNotFound):
            store.get_item(OWNER, 2**64)

        assert not store.locked
        assert store.get_item(OWNER, 0).status == "available"

    def test_huge_limits_rejected(self, store):
        with pytest.raises(InvalidLimits):
            store.set_limits(2**64, 2**64)
        with pytest.raises(InvalidLimits):
            store.set_limits(10, SQLITE_MAX + 1)

        assert store.limits == Limits(max_quantity=100, max_price=1000)

    def test_huge_quantity_and_price_rejected(self, store):
        with pytest.raises(InvalidQuantity):
            store.add_item(OWNER, "widget", 2**64, 1)
        with pytest.raises(InvalidPrice):
            store.add_item(OWNER, "widget", 1, 2**64)

        store.add_item(OWNER, "widget", 1, 1)
        with pytest.raises(InvalidQuantity):
            store.update_item(OWNER, 0, 2**64, "reserved")

    def test_largest_storable_values_accepted(self, store):
        store.set_limits(SQLITE_MAX, SQLITE_MAX)

        assert store.add_item(OWNER, "widget", SQLITE_MAX, SQLITE_MAX) == 0
        item = store.get_item(OWNER, 0)
        assert item.quantity == SQLITE_MAX
        assert item.price == SQLITE_MAX

    def test_huge_default_limits_rejected(self, tmp_path):
        with pytest.raises(InvalidLimits):
            InventoryStore(
                backend=SQLiteBackend(db_path=str(tmp_path / "ledger.db")),
                default_limits=Limits(max_quantity=2**64, max_price=1),
            )

    def test_memory_backend_is_unbounded(self):
        store = InventoryStore(clock=lambda: NOW)
        store.set_limits(2**64, 2**64)

        assert store.add_item(OWNER, "widget", 2**64, 2**64) == 0
        with pytest.raises(ItemNotFound):
            store.get_item(OWNER, 2**64)
