"""
Basic smoke tests for Inventory Ledger models and events.

Run with: pytest tests/
"""

import pytest
from pydantic import ValidationError

from inventory_ledger import __version__
from inventory_ledger.events import (
    EventEmitter,
    InventoryEventType,
    ItemAdded,
    ItemRemoved,
    ItemUpdated,
)
from inventory_ledger.inventory import Item, Limits


class TestModels:
    """Test basic model creation."""

    def test_version(self):
        assert __version__

    def test_item_creation(self):
        item = Item(name="widget", quantity=10, status="available", price=5, timestamp=1700000000)
        assert item.name == "widget"
        assert item.is_live is True

    def test_tombstone_is_zero_valued(self):
        item = Item.tombstone()
        assert item.name == ""
        assert item.quantity == 0
        assert item.status == ""
        assert item.price == 0
        assert item.timestamp == 0
        assert item.is_live is False

    def test_item_rejects_negative_values(self):
        with pytest.raises(ValidationError):
            Item(name="widget", quantity=-1)

    def test_limits_must_be_positive(self):
        with pytest.raises(ValidationError):
            Limits(max_quantity=0, max_price=10)


class TestEvents:
    """Test notification models and the emitter."""

    def test_event_types(self):
        assert ItemAdded(owner="0xa", item_id=0, name="w", quantity=1, price=1).event_type == InventoryEventType.ITEM_ADDED
        assert ItemUpdated(owner="0xa", item_id=0, quantity=1, status="x").event_type == InventoryEventType.ITEM_UPDATED
        assert ItemRemoved(owner="0xa", item_id=0).event_type == InventoryEventType.ITEM_REMOVED

    def test_summary(self):
        event = ItemUpdated(owner="0xa", item_id=3, quantity=2, status="reserved")
        summary = event.summary()
        assert summary.startswith("item_updated:")
        assert "owner=0xa" in summary
        assert "item=3" in summary
        assert "status=reserved" in summary

    def test_emit_reaches_all_subscribers(self):
        first, second = [], []
        emitter = EventEmitter([first.append])
        emitter.subscribe(second.append)

        event = ItemRemoved(owner="0xa", item_id=1)
        assert emitter.emit(event) == 2
        assert first == [event]
        assert second == [event]

    def test_failing_subscriber_does_not_block_others(self):
        received = []

        def broken(event):
            raise RuntimeError("observer down")

        emitter = EventEmitter([broken, received.append])
        delivered = emitter.emit(ItemRemoved(owner="0xa", item_id=0))

        assert delivered == 1
        assert len(received) == 1

    def test_unsubscribe(self):
        received = []
        emitter = EventEmitter()
        emitter.subscribe(received.append)
        emitter.subscribe(received.append)  # duplicate ignored
        assert len(emitter.subscribers) == 1

        emitter.unsubscribe(received.append)
        emitter.emit(ItemRemoved(owner="0xa", item_id=0))
        assert received == []
