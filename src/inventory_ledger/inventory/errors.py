"""
Inventory error taxonomy.

Every error is a deterministic precondition failure; none of them is
retryable and none leaves partial state behind.
"""


class InventoryError(Exception):
    """Base class for ledger errors."""

    code = "inventory_error"


class InvalidQuantity(InventoryError):
    """Quantity is zero on add, negative, or above the current bound."""

    code = "invalid_quantity"


class InvalidPrice(InventoryError):
    """Price is zero, negative, or above the current bound."""

    code = "invalid_price"


class InvalidStatus(InventoryError):
    """Status text is empty."""

    code = "invalid_status"


class ItemNotFound(InventoryError):
    """The (owner, item_id) slot was never allocated or has been removed."""

    code = "item_not_found"

    def __init__(self, owner: str, item_id: int):
        super().__init__(f"Item {item_id} not found for owner {owner}")
        self.owner = owner
        self.item_id = item_id


class InvalidLimits(InventoryError):
    """A proposed bound is not strictly positive."""

    code = "invalid_limits"


class ReentrantCall(InventoryError):
    """A mutating operation started while another one holds the guard."""

    code = "reentrant_call"

    def __init__(self, operation: str):
        super().__init__(f"Re-entrant call to {operation} rejected: store is locked")
        self.operation = operation
