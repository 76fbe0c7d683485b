"""
Inventory data models.
"""

from pydantic import BaseModel, Field


class Item(BaseModel):
    """
    A single inventory entry owned by one principal.
    
    Removed slots are reported as the zero Item (see ``Item.tombstone``).
    """

    name: str = Field("", description="Item name")
    quantity: int = Field(0, ge=0, description="Units in stock")
    status: str = Field("", description="Free-form status (available, reserved, depleted)")
    price: int = Field(0, ge=0, description="Unit price as an opaque integer")
    timestamp: int = Field(
        0,
        ge=0,
        description="Unix time of creation or last update, 0 for a removed slot",
    )

    @classmethod
    def tombstone(cls) -> "Item":
        """Zero-valued item standing in for a removed slot."""
        return cls()

    @property
    def is_live(self) -> bool:
        return self.timestamp != 0

    class Config:
        json_schema_extra = {
            "example": {
                "name": "widget",
                "quantity": 10,
                "status": "available",
                "price": 5,
                "timestamp": 1735689600,
            }
        }


class Limits(BaseModel):
    """Global write-time bounds shared by every owner."""

    max_quantity: int = Field(..., gt=0, description="Largest quantity accepted on write")
    max_price: int = Field(..., gt=0, description="Largest price accepted on add")


STATUS_AVAILABLE = "available"

DEFAULT_MAX_QUANTITY = 10_000
DEFAULT_MAX_PRICE = 1_000_000_000
