"""
items/service.py -- Owner-scoped item operations.

Every method takes the caller's owner_id first. Routes get it from the
verified token (auth/dependencies.py) and never from the request body, so a
client cannot write into or read from another tenant's items.

Numeric input normalization:
  price and quantity are never a reason to reject a request. coerce_price()
  and coerce_quantity() parse what they can and fall back to 0 for anything
  absent, unparsable, non-finite, boolean or negative. "19.99" -> 19.99,
  "3" -> 3, "not-a-number" -> 0. Existing clients depend on this leniency.

NotFound is raised for both "no such id" and "not yours" -- the store
returns the same empty result for each.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

from core.errors import BadRequestError, NotFoundError
from items.models import Item
from items.store import ItemStore

logger = logging.getLogger("stockroom.items")

ITEM_NOT_FOUND = "Item not found"

_MAX_QUANTITY = 2_147_483_647

# Largest id a 64-bit INTEGER primary key can hold.
_MAX_ITEM_ID = 2**63 - 1


def _parse_number(value: Any) -> float:
    """Parse value as a finite, non-negative float, or return 0.0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def coerce_price(value: Any) -> float:
    """Parse-or-default for price: any invalid input becomes 0.0."""
    return _parse_number(value)


def coerce_quantity(value: Any) -> int:
    """Parse-or-default for quantity: any invalid input becomes 0; fractions truncate."""
    quantity = int(_parse_number(value))
    # Must fit a 32-bit INTEGER column on PostgreSQL.
    return quantity if quantity <= _MAX_QUANTITY else 0


def _require_name(name: Optional[str]) -> str:
    cleaned = name.strip() if isinstance(name, str) else ""
    if not cleaned:
        raise BadRequestError("Name is required")
    return cleaned


def _require_storable_id(item_id: int) -> None:
    # No row can carry an id outside the INTEGER column range.
    if not 0 < item_id <= _MAX_ITEM_ID:
        raise NotFoundError(ITEM_NOT_FOUND)


class ItemService:
    """CRUD over items, always filtered by the caller's identity."""

    def __init__(self, store: ItemStore) -> None:
        self.store = store

    def create(
        self,
        owner_id: int,
        name: Optional[str],
        description: Optional[str] = None,
        price: Any = None,
        quantity: Any = None,
    ) -> Item:
        item = Item(
            owner_id=owner_id,
            name=_require_name(name),
            description=description,
            price=coerce_price(price),
            quantity=coerce_quantity(quantity),
        )
        item_id = self.store.create_item(item)
        created = self.store.get_item(item_id, owner_id)
        if created is None:
            # Row vanished between insert and read-back (concurrent delete).
            raise NotFoundError(ITEM_NOT_FOUND)
        logger.info("Item %s created by user %s", item_id, owner_id)
        return created

    def list_items(self, owner_id: int) -> list[Item]:
        return self.store.list_items(owner_id)

    def get(self, owner_id: int, item_id: int) -> Item:
        _require_storable_id(item_id)
        item = self.store.get_item(item_id, owner_id)
        if item is None:
            raise NotFoundError(ITEM_NOT_FOUND)
        return item

    def update(self, owner_id: int, item_id: int, name: Optional[str], description: Optional[str] = None) -> Item:
        """Replace name and description. price and quantity cannot change here."""
        cleaned = _require_name(name)
        _require_storable_id(item_id)
        if not self.store.update_item(item_id, owner_id, cleaned, description):
            raise NotFoundError(ITEM_NOT_FOUND)
        return self.get(owner_id, item_id)

    def delete(self, owner_id: int, item_id: int) -> int:
        """Hard-delete an item and return its id."""
        _require_storable_id(item_id)
        if not self.store.delete_item(item_id, owner_id):
            raise NotFoundError(ITEM_NOT_FOUND)
        logger.info("Item %s deleted by user %s", item_id, owner_id)
        return item_id
