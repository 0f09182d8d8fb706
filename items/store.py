"""
items/store.py -- SQLAlchemy-backed persistence layer for owner-scoped items.

Uses SQLAlchemy Core (not ORM) so the dataclass in items/models.py remains
the authoritative domain representation. Swapping SQLite for PostgreSQL is
a connection string change, not a rewrite.

Pattern: Repository + Data Mapper. ItemStore is the repository; _row_to_item
is the mapper. Route handlers never touch SQL directly.

Ownership:
  Every method takes owner_id. Single-item reads and writes filter on the
  combined predicate (id = :id AND owner_id = :owner_id), built in one place
  by _owned(). "No such item" and "someone else's item" are the same empty
  result, so there is no second branch that could leak which one it was.

  update_item() and delete_item() are single statements; rowcount tells the
  caller whether anything matched. Two concurrent deletes of the same item
  cannot both report success.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = ItemStore("sqlite:///./stockroom.db")
    item_id = store.create_item(Item(owner_id=1, name="Widget"))
    store.get_item(item_id, owner_id=1)
    store.delete_item(item_id, owner_id=1)
    store.close()
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Float, Index, Integer, MetaData, String, Table, Text
from sqlalchemy.engine import Engine

from core.db import make_engine
from core.db import ping as db_ping
from items.models import Item

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_items = Table(
    "items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("owner_id", Integer, nullable=False),
    Column("name", String(255), nullable=False),
    Column("description", Text),
    Column("price", Float, nullable=False, server_default="0"),
    Column("quantity", Integer, nullable=False, server_default="0"),
    Column("created_at", String(32), nullable=False),
    Index("ix_items_owner_id", "owner_id"),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    """Current UTC time as ISO 8601 with second precision, e.g. 2026-10-18T09:30:00Z."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _owned(item_id: int, owner_id: int):
    return (_items.c.id == item_id) & (_items.c.owner_id == owner_id)


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ItemStore:
    """Repository for Item entities, always scoped to an owner."""

    def __init__(self, db_url: str) -> None:
        self.engine: Engine = make_engine(db_url)
        metadata.create_all(self.engine)

    def create_item(self, item: Item) -> int:
        """Insert a new item and return its assigned database ID."""
        with self.engine.begin() as conn:
            result = conn.execute(
                _items.insert().values(
                    owner_id=item.owner_id,
                    name=item.name,
                    description=item.description,
                    price=item.price,
                    quantity=item.quantity,
                    created_at=_now_iso(),
                )
            )
            return result.inserted_primary_key[0]

    def list_items(self, owner_id: int) -> list[Item]:
        """Return every item owned by owner_id, ordered by id."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _items.select().where(_items.c.owner_id == owner_id).order_by(_items.c.id)
            ).fetchall()
        return [_row_to_item(r) for r in rows]

    def get_item(self, item_id: int, owner_id: int) -> Optional[Item]:
        """Return the item if it exists and belongs to owner_id, else None."""
        with self.engine.connect() as conn:
            row = conn.execute(_items.select().where(_owned(item_id, owner_id))).fetchone()
        return _row_to_item(row) if row is not None else None

    def update_item(self, item_id: int, owner_id: int, name: str, description: Optional[str]) -> bool:
        """Overwrite name and description. price, quantity and owner_id are untouched.

        Returns True if a row was updated, False if not found or wrong owner.
        """
        with self.engine.begin() as conn:
            result = conn.execute(
                _items.update().where(_owned(item_id, owner_id)).values(name=name, description=description)
            )
        return result.rowcount > 0

    def delete_item(self, item_id: int, owner_id: int) -> bool:
        """Permanently delete an item. Returns True if deleted, False if not found or wrong owner."""
        with self.engine.begin() as conn:
            result = conn.execute(_items.delete().where(_owned(item_id, owner_id)))
        return result.rowcount > 0

    def ping(self) -> bool:
        return db_ping(self.engine)

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_item(row) -> Item:
    return Item(
        id=row.id,
        owner_id=row.owner_id,
        name=row.name,
        description=row.description,
        price=float(row.price),
        quantity=int(row.quantity),
        created_at=row.created_at,
    )
