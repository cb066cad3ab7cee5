"""Expand cart lines into per-unit rows and order them for display."""

from __future__ import annotations

import unicodedata
from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import Any

from teamcart.assignment import plan_item_units
from teamcart.constant import EXTRA_LABEL, ROW_TYPE_EXTRA, ROW_TYPE_MEMBER, UNASSIGNED_LABEL
from teamcart.customizations import compute_unit_price, extract_customizations
from teamcart.models import CartItem, UnitRow


def _source_id(item: CartItem) -> str:
    return item.id or item.menu_item_id or item.name


def expand_item(item: CartItem | Mapping[str, Any]) -> list[UnitRow]:
    """Rows for a single cart line: named units first, then extras."""
    cart_item = CartItem.from_record(item)
    plan = plan_item_units(cart_item)

    template = UnitRow(
        assignee="",
        item_name=cart_item.name,
        customizations=extract_customizations(cart_item),
        special=cart_item.special_instructions.strip(),
        unit_price=compute_unit_price(cart_item),
        source_id=_source_id(cart_item),
    )

    rows: list[UnitRow] = []
    for name, count in plan.units_by_name.items():
        rows.extend(replace(template, assignee=name, type=ROW_TYPE_MEMBER) for _ in range(count))
    rows.extend(replace(template, assignee=EXTRA_LABEL, type=ROW_TYPE_EXTRA) for _ in range(plan.extras))
    return rows


def expand_items_to_unit_rows(items: Iterable[CartItem | Mapping[str, Any]] | None) -> list[UnitRow]:
    """One row per physical unit across the whole cart, item by item."""
    rows: list[UnitRow] = []
    for item in items or ():
        rows.extend(expand_item(item))
    return rows


def assignee_rank(label: str) -> int:
    """Named people sort first, then ``Unassigned``, then ``Extra``."""
    lowered = str(label or "").strip().lower()
    if lowered == UNASSIGNED_LABEL.lower():
        return 1
    if lowered == EXTRA_LABEL.lower():
        return 2
    return 0


def collation_key(label: str) -> str:
    """Case- and accent-insensitive comparison key (base-letter collation)."""
    decomposed = unicodedata.normalize("NFKD", str(label or ""))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def _row_sort_key(row: UnitRow) -> tuple[Any, ...]:
    return (
        assignee_rank(row.assignee),
        collation_key(row.assignee),
        row.assignee,
        row.item_name,
        row.customizations,
        row.special,
        row.unit_price,
        str(row.source_id),
        row.type,
    )


def sort_assignee_rows(rows: Iterable[UnitRow]) -> list[UnitRow]:
    """
    Order rows by assignee: people A to Z, then Unassigned, then Extra.

    Rows that collate equally are ordered by their remaining fields, so any
    permutation of the same rows sorts to the same list.
    """
    return sorted(rows, key=_row_sort_key)


def add_line_numbers(rows: Iterable[UnitRow]) -> list[UnitRow]:
    """Copy rows with 1-based ``line_no`` in their current order."""
    return [replace(row, line_no=idx) for idx, row in enumerate(rows, start=1)]


def unit_rows_for_display(items: Iterable[CartItem | Mapping[str, Any]] | None) -> list[UnitRow]:
    """Expanded, sorted and numbered rows as shown in the cart details table."""
    return add_line_numbers(sort_assignee_rows(expand_items_to_unit_rows(items)))
