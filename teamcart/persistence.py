"""SQLite persistence for shared team carts and their lines."""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable
from uuid import uuid4

from teamcart import config
from teamcart.constant import DEFAULT_ITEM_NAME
from teamcart.models import AssignmentMeta, CartItem, Customization, coerce_int, split_assignment

logger = logging.getLogger(__name__)

EXTRA_SENTINEL = "__EXTRA__"
CART_STATUSES = frozenset({"draft", "submitted", "ordered", "cancelled"})


@dataclass(frozen=True)
class CartSnapshot:
    """A cart header plus its lines in insertion order."""

    cart_id: str
    team_id: str
    restaurant_id: str
    title: str
    status: str
    items: list[CartItem]


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@contextmanager
def _connect(db_path: str | None = None) -> Iterator[sqlite3.Connection]:
    """Open the store; the connection is closed when the block exits."""
    db_file = Path(db_path or config.DB_PATH)
    db_file.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_file)
    try:
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        yield conn
    finally:
        conn.close()


def bootstrap_schema(db_path: str | None = None) -> None:
    """Create persistence schema if it does not already exist."""
    with _connect(db_path) as conn:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS carts (
                id TEXT PRIMARY KEY,
                team_id TEXT NOT NULL,
                restaurant_id TEXT NOT NULL,
                title TEXT NOT NULL DEFAULT 'Team Cart',
                status TEXT NOT NULL DEFAULT 'draft',
                created_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS cart_items (
                id TEXT PRIMARY KEY,
                cart_id TEXT NOT NULL,
                line_index INTEGER NOT NULL,
                menu_item_id TEXT,
                item_name TEXT NOT NULL,
                quantity INTEGER NOT NULL DEFAULT 1,
                price REAL NOT NULL DEFAULT 0,
                special_instructions TEXT NOT NULL DEFAULT '',
                customizations TEXT NOT NULL DEFAULT '[]',
                options TEXT,
                assignment TEXT,
                created_at TEXT NOT NULL,
                FOREIGN KEY(cart_id) REFERENCES carts(id) ON DELETE CASCADE
            );

            CREATE INDEX IF NOT EXISTS idx_cart_items_cart_id_line
                ON cart_items(cart_id, line_index);

            CREATE INDEX IF NOT EXISTS idx_carts_team_restaurant
                ON carts(team_id, restaurant_id, status);
            """
        )


def find_active_cart(team_id: str, restaurant_id: str, db_path: str | None = None) -> str | None:
    """Return the newest draft cart id for a team at a restaurant, if any."""
    with _connect(db_path) as conn:
        row = conn.execute(
            """
            SELECT id FROM carts
            WHERE team_id = ? AND restaurant_id = ? AND status = 'draft'
            ORDER BY created_at DESC, rowid DESC
            LIMIT 1
            """,
            (team_id, restaurant_id),
        ).fetchone()
    return row["id"] if row is not None else None


def ensure_cart(team_id: str, restaurant_id: str, title: str | None = None, db_path: str | None = None) -> str:
    """Reuse the active draft cart or create a new one."""
    if not team_id or not restaurant_id:
        raise ValueError("team_id and restaurant_id are required")

    existing = find_active_cart(team_id, restaurant_id, db_path=db_path)
    if existing is not None:
        return existing

    cart_id = uuid4().hex
    with _connect(db_path) as conn:
        with conn:
            conn.execute(
                "INSERT INTO carts (id, team_id, restaurant_id, title, status, created_at) VALUES (?, ?, ?, ?, 'draft', ?)",
                (cart_id, team_id, restaurant_id, title or "Team Cart", _utc_now_iso()),
            )
    logger.info("created cart %s for team=%s restaurant=%s", cart_id, team_id, restaurant_id)
    return cart_id


def _assignment_payload(assignment: AssignmentMeta | Mapping[str, Any] | None) -> AssignmentMeta | None:
    """Sanitize assignment input; extra sentinels in member ids become extra units."""
    if assignment is None:
        return None
    if isinstance(assignment, AssignmentMeta):
        meta = assignment
    else:
        meta = AssignmentMeta.from_mapping(assignment)
        if meta is None:
            return None

    inferred_extras = sum(1 for member_id in meta.member_ids if member_id == EXTRA_SENTINEL)
    return AssignmentMeta(
        member_ids=tuple(member_id for member_id in meta.member_ids if member_id != EXTRA_SENTINEL),
        display_names=meta.display_names,
        extra_count=max(meta.extra_count, inferred_extras),
    )


def _customizations_payload(customizations: Iterable[Customization | Mapping[str, Any]] | None) -> str:
    parsed = CartItem.from_record({"customizations": list(customizations or [])}).customizations
    return json.dumps([{"name": c.name, "price": c.price} for c in parsed])


def add_item(
    cart_id: str,
    name: str,
    quantity: int = 1,
    unit_price: float = 0.0,
    menu_item_id: str | None = None,
    special_instructions: str = "",
    options: Any = None,
    assignment: AssignmentMeta | Mapping[str, Any] | None = None,
    customizations: Iterable[Customization | Mapping[str, Any]] | None = None,
    db_path: str | None = None,
) -> str:
    """Insert a cart line and return its id."""
    options, legacy_assignment = split_assignment(options)
    meta = _assignment_payload(assignment if assignment is not None else legacy_assignment)

    item_id = uuid4().hex
    with _connect(db_path) as conn:
        with conn:
            if conn.execute("SELECT 1 FROM carts WHERE id = ?", (cart_id,)).fetchone() is None:
                raise LookupError(f"Unknown cart {cart_id!r}")
            (line_index,) = conn.execute(
                "SELECT COALESCE(MAX(line_index), -1) + 1 FROM cart_items WHERE cart_id = ?", (cart_id,)
            ).fetchone()
            conn.execute(
                """
                INSERT INTO cart_items (
                    id, cart_id, line_index, menu_item_id, item_name, quantity, price,
                    special_instructions, customizations, options, assignment, created_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item_id,
                    cart_id,
                    line_index,
                    menu_item_id,
                    name or DEFAULT_ITEM_NAME,
                    max(1, coerce_int(quantity, default=1)),
                    float(unit_price or 0),
                    special_instructions or "",
                    _customizations_payload(customizations),
                    json.dumps(options) if options is not None else None,
                    json.dumps(meta.to_record()) if meta is not None else None,
                    _utc_now_iso(),
                ),
            )
    logger.info("added item %s to cart %s", item_id, cart_id)
    return item_id


_UNSET: Any = object()


def update_item(
    cart_id: str,
    item_id: str,
    *,
    quantity: int | None = None,
    price: float | None = None,
    special_instructions: str | None = None,
    options: Any = _UNSET,
    assignment: Any = _UNSET,
    db_path: str | None = None,
) -> None:
    """Patch the given fields of one cart line."""
    updates: dict[str, Any] = {}
    if quantity is not None:
        if quantity < 1:
            raise ValueError("quantity must be at least 1")
        updates["quantity"] = int(quantity)
    if price is not None:
        updates["price"] = float(price)
    if special_instructions is not None:
        updates["special_instructions"] = special_instructions
    if options is not _UNSET:
        options, legacy_assignment = split_assignment(options)
        updates["options"] = json.dumps(options) if options is not None else None
        if assignment is _UNSET and legacy_assignment is not None:
            assignment = legacy_assignment
    if assignment is not _UNSET:
        meta = _assignment_payload(assignment)
        updates["assignment"] = json.dumps(meta.to_record()) if meta is not None else None
    if not updates:
        return

    assignments = ", ".join(f"{column} = ?" for column in updates)
    with _connect(db_path) as conn:
        with conn:
            cur = conn.execute(
                f"UPDATE cart_items SET {assignments} WHERE id = ? AND cart_id = ?",
                (*updates.values(), item_id, cart_id),
            )
            if cur.rowcount == 0:
                raise LookupError(f"Unknown item {item_id!r} in cart {cart_id!r}")
    logger.info("updated item %s fields=%s", item_id, sorted(updates))


def remove_item(cart_id: str, item_id: str, db_path: str | None = None) -> None:
    with _connect(db_path) as conn:
        with conn:
            cur = conn.execute("DELETE FROM cart_items WHERE id = ? AND cart_id = ?", (item_id, cart_id))
            if cur.rowcount == 0:
                raise LookupError(f"Unknown item {item_id!r} in cart {cart_id!r}")
    logger.info("removed item %s from cart %s", item_id, cart_id)


def update_cart_status(cart_id: str, status: str, db_path: str | None = None) -> None:
    """Update status for a cart."""
    if status not in CART_STATUSES:
        raise ValueError(f"status must be one of {sorted(CART_STATUSES)}")
    with _connect(db_path) as conn:
        with conn:
            cur = conn.execute("UPDATE carts SET status = ? WHERE id = ?", (status, cart_id))
            if cur.rowcount == 0:
                raise LookupError(f"Unknown cart {cart_id!r}")


def _load_json(raw: str | None) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("discarding unreadable JSON column value %r", raw[:40])
        return None


def _row_to_item(row: sqlite3.Row) -> CartItem:
    record = {
        "id": row["id"],
        "menu_item_id": row["menu_item_id"],
        "name": row["item_name"],
        "quantity": row["quantity"],
        "price": row["price"],
        "special_instructions": row["special_instructions"],
        "customizations": _load_json(row["customizations"]),
        "options": _load_json(row["options"]),
        "assignment": _load_json(row["assignment"]),
    }
    return CartItem.from_record(record)


def get_cart_snapshot(cart_id: str, db_path: str | None = None) -> CartSnapshot | None:
    """Read a cart and all of its lines, or None when the cart does not exist."""
    with _connect(db_path) as conn:
        cart = conn.execute(
            "SELECT id, team_id, restaurant_id, title, status FROM carts WHERE id = ?", (cart_id,)
        ).fetchone()
        if cart is None:
            return None
        rows = conn.execute(
            "SELECT * FROM cart_items WHERE cart_id = ? ORDER BY line_index ASC", (cart_id,)
        ).fetchall()

    return CartSnapshot(
        cart_id=cart["id"],
        team_id=cart["team_id"],
        restaurant_id=cart["restaurant_id"],
        title=cart["title"],
        status=cart["status"] or "draft",
        items=[_row_to_item(row) for row in rows],
    )
