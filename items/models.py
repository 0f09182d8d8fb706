"""
items/models.py -- Domain dataclasses for the item inventory.

These are pure data containers with zero logic. Normalization of client
input lives in items/service.py; SQL lives in items/store.py.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Item:
    """A resource owned by exactly one identity.

    owner_id is set from the authenticated caller on insert and never
    changes afterwards. price and quantity are non-negative.

    id is None before the record is written to the database.
    """

    owner_id: int
    name: str
    description: Optional[str] = None
    price: float = 0.0
    quantity: int = 0
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601 UTC, second precision, set by store on insert
