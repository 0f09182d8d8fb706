"""Unit tests for items/store.py -- owner-scoped persistence.

Covers:
- create/get round trip with server-assigned id and second-precision UTC timestamp
- list_items() only returns the owner's rows
- get/update/delete with the wrong owner behave exactly like a missing id
- update touches name and description only
- concurrent deletes of one item: exactly one succeeds
"""

from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor

from items.models import Item
from items.store import ItemStore

_ISO_SECONDS = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$")

OWNER_A = 1
OWNER_B = 2


def _make(store: ItemStore, owner_id: int, name: str = "Widget", **kwargs) -> int:
    return store.create_item(Item(owner_id=owner_id, name=name, **kwargs))


def test_create_and_get(item_store: ItemStore) -> None:
    item_id = _make(item_store, OWNER_A, description="blue", price=19.99, quantity=3)
    item = item_store.get_item(item_id, OWNER_A)
    assert item is not None
    assert item.id == item_id
    assert item.owner_id == OWNER_A
    assert item.name == "Widget"
    assert item.description == "blue"
    assert item.price == 19.99
    assert item.quantity == 3
    assert _ISO_SECONDS.match(item.created_at)


def test_list_is_owner_scoped(item_store: ItemStore) -> None:
    a1 = _make(item_store, OWNER_A, "a1")
    a2 = _make(item_store, OWNER_A, "a2")
    _make(item_store, OWNER_B, "b1")

    assert [i.id for i in item_store.list_items(OWNER_A)] == [a1, a2]
    assert [i.name for i in item_store.list_items(OWNER_B)] == ["b1"]
    assert item_store.list_items(3) == []


def test_foreign_owner_is_indistinguishable_from_missing(item_store: ItemStore) -> None:
    """get/update/delete with the wrong owner return exactly what a missing id returns."""
    item_id = _make(item_store, OWNER_A)

    assert item_store.get_item(item_id, OWNER_B) is None
    assert item_store.get_item(999_999, OWNER_B) is None
    assert item_store.update_item(item_id, OWNER_B, "hijacked", None) is False
    assert item_store.update_item(999_999, OWNER_B, "hijacked", None) is False
    assert item_store.delete_item(item_id, OWNER_B) is False
    assert item_store.delete_item(999_999, OWNER_B) is False

    # The owner's row is untouched.
    assert item_store.get_item(item_id, OWNER_A).name == "Widget"


def test_update_changes_name_and_description_only(item_store: ItemStore) -> None:
    item_id = _make(item_store, OWNER_A, description="old", price=5.0, quantity=7)
    before = item_store.get_item(item_id, OWNER_A)

    assert item_store.update_item(item_id, OWNER_A, "Gadget", "new") is True

    after = item_store.get_item(item_id, OWNER_A)
    assert after.name == "Gadget"
    assert after.description == "new"
    assert after.price == 5.0
    assert after.quantity == 7
    assert after.owner_id == OWNER_A
    assert after.created_at == before.created_at


def test_delete_is_hard_and_not_repeatable(item_store: ItemStore) -> None:
    item_id = _make(item_store, OWNER_A)
    assert item_store.delete_item(item_id, OWNER_A) is True
    assert item_store.get_item(item_id, OWNER_A) is None
    assert item_store.delete_item(item_id, OWNER_A) is False


def test_concurrent_deletes_exactly_one_wins(item_store: ItemStore) -> None:
    """Single-statement DELETE means parallel deletes cannot both report success."""
    item_id = _make(item_store, OWNER_A)

    with ThreadPoolExecutor(max_workers=6) as pool:
        results = list(pool.map(lambda _: item_store.delete_item(item_id, OWNER_A), range(6)))

    assert results.count(True) == 1
    assert results.count(False) == 5
