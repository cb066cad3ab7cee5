"""Normalize stored option shapes into customization text and unit prices."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from teamcart.constant import ASSIGNMENT_KEY, OPTION_NAME_FIELDS
from teamcart.models import CartItem, Customization, coerce_number


def _format_scalar(value: bool | int | float) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _option_price(option: Mapping[str, Any]) -> float:
    price = coerce_number(option.get("price"))
    if price:
        return price
    return coerce_number(option.get("price_cents")) / 100


def _option_name(option: Mapping[str, Any]) -> str:
    for name_field in OPTION_NAME_FIELDS:
        value = option.get(name_field)
        if value:
            return str(value)
    return ""


def _named_option(option: Mapping[str, Any]) -> Customization | None:
    name = _option_name(option)
    if not name:
        return None
    return Customization(name=name, price=_option_price(option))


def normalize_options(options: Any) -> list[Customization]:
    """
    Convert any stored option payload into canonical customizations.

    Accepted shapes:
    - a mapping of group name to a string, number, boolean, list or option object
    - a list of strings and/or option objects (indices act as keys)

    Option objects are named by ``name``, ``label`` or ``title`` and priced by
    ``price`` or ``price_cents / 100``. Objects without a name contribute their
    string members. The reserved assignment key is always skipped.
    """
    if isinstance(options, Mapping):
        entries = list(options.items())
    elif isinstance(options, (list, tuple)):
        entries = list(enumerate(options))
    else:
        return []

    parts: list[Customization] = []
    for key, value in entries:
        if key == ASSIGNMENT_KEY:
            continue

        if isinstance(value, str):
            if value:
                parts.append(Customization(name=value))
        elif isinstance(value, (bool, int, float)):
            parts.append(Customization(name=f"{key}: {_format_scalar(value)}"))
        elif isinstance(value, (list, tuple)):
            for element in value:
                if not element:
                    continue
                if isinstance(element, str):
                    parts.append(Customization(name=element))
                elif isinstance(element, Mapping):
                    named = _named_option(element)
                    if named is not None:
                        parts.append(named)
        elif isinstance(value, Mapping):
            named = _named_option(value)
            if named is not None:
                parts.append(named)
            else:
                parts.extend(Customization(name=member) for member in value.values() if isinstance(member, str) and member)
    return parts


def format_customization(customization: Customization) -> str:
    """Render ``name`` or ``name (+$X.XX)`` when the option carries a price."""
    if customization.price:
        return f"{customization.name} (+${customization.price:.2f})"
    return customization.name


def customizations_for(item: CartItem | Mapping[str, Any]) -> list[Customization]:
    """Priced customizations win; otherwise fall back to the normalized options."""
    cart_item = CartItem.from_record(item)
    if cart_item.customizations:
        return list(cart_item.customizations)
    return normalize_options(cart_item.options)


def extract_customizations(item: CartItem | Mapping[str, Any]) -> str:
    """Summarize an item's customizations as one comma-separated string."""
    return ", ".join(format_customization(c) for c in customizations_for(item) if c.name.strip())


def compute_unit_price(item: CartItem | Mapping[str, Any]) -> float:
    """Base (or customized) price plus per-unit customization prices."""
    cart_item = CartItem.from_record(item)
    base = cart_item.customized_price if cart_item.customized_price is not None else cart_item.price
    return base + sum(c.price for c in cart_item.customizations)
