"""Assignee extraction and per-unit reconciliation for cart lines."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from teamcart.constant import EXTRA_NAME_ALIASES, UNASSIGNED_LABEL
from teamcart.models import CartItem, UnitPlan, coerce_int


def is_extra_name(name: Any) -> bool:
    """True for the literal ``extra`` / ``extras`` placeholders, any case."""
    return str(name or "").strip().lower() in EXTRA_NAME_ALIASES


def _clean_names(raw_names: Iterable[Any]) -> list[str]:
    names: list[str] = []
    seen: set[str] = set()
    for raw in raw_names:
        name = str(raw or "").strip()
        if not name or is_extra_name(name) or name in seen:
            continue
        seen.add(name)
        names.append(name)
    return names


def get_member_names(item: CartItem | Mapping[str, Any]) -> list[str]:
    """
    Return the deduplicated assignee names for a cart line, in stored order.

    Display names from the assignment metadata are preferred; the
    ``assigned_to`` list is only consulted when those are missing.
    """
    cart_item = CartItem.from_record(item)
    if cart_item.assignment is not None:
        names = _clean_names(cart_item.assignment.display_names)
        if names:
            return names
    return _clean_names(assignee.name for assignee in cart_item.assigned_to)


def extras_count_for(item: CartItem | Mapping[str, Any]) -> int:
    """Number of units stored as assigned to nobody in particular."""
    cart_item = CartItem.from_record(item)
    if cart_item.assignment is None:
        return 0
    return cart_item.assignment.extra_count


def plan_units_by_name(quantity: Any, name_order: Iterable[str], extras_count: Any = 0) -> UnitPlan:
    """
    Spread ``quantity`` units over named assignees and an extras bucket.

    Every distinct name starts with one unit and extras start at
    ``extras_count``. The difference to ``max(1, quantity)`` is then settled:

    - growth goes entirely to the last name in ``name_order`` (extras when
      there are no names)
    - shrinkage is taken from extras first, then from names walking
      ``name_order`` backwards; names that reach zero are dropped

    With no names and no extras the whole quantity lands in ``Unassigned``.
    ``name_order`` is positional: the last name is the last one given, never
    the alphabetically last.
    """
    total_units = max(1, coerce_int(quantity, default=1))
    extras = max(0, coerce_int(extras_count))

    units_by_name: dict[str, int] = {}
    for name in name_order:
        if name not in units_by_name:
            units_by_name[name] = 1

    if not units_by_name and extras == 0:
        return UnitPlan(units_by_name={UNASSIGNED_LABEL: total_units}, extras=0)

    diff = total_units - (len(units_by_name) + extras)
    if diff > 0:
        if units_by_name:
            last_name = next(reversed(units_by_name))
            units_by_name[last_name] += diff
        else:
            extras += diff
    elif diff < 0:
        to_remove = -diff
        from_extras = min(extras, to_remove)
        extras -= from_extras
        to_remove -= from_extras
        for name in reversed(list(units_by_name)):
            if to_remove <= 0:
                break
            taken = min(units_by_name[name], to_remove)
            units_by_name[name] -= taken
            to_remove -= taken

    return UnitPlan(
        units_by_name={name: count for name, count in units_by_name.items() if count > 0},
        extras=extras,
    )


def plan_item_units(item: CartItem | Mapping[str, Any]) -> UnitPlan:
    """Reconcile one cart line's stored assignment against its current quantity."""
    cart_item = CartItem.from_record(item)
    return plan_units_by_name(cart_item.quantity, get_member_names(cart_item), extras_count_for(cart_item))
