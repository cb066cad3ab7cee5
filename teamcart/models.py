"""Domain models for team carts and their per-unit display rows."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from teamcart.constant import ASSIGNMENT_KEY, DEFAULT_ITEM_NAME, ROW_TYPE_MEMBER

logger = logging.getLogger(__name__)


def coerce_number(value: Any, default: float = 0.0) -> float:
    """Best-effort numeric conversion; anything unusable becomes ``default``."""
    if value is None:
        return default
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def coerce_int(value: Any, default: int = 0) -> int:
    """Best-effort integer conversion, truncating fractional values."""
    number = coerce_number(value, float(default))
    return int(number)


def _first_present(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def split_assignment(options: Any) -> tuple[Any, Any]:
    """Separate a legacy ``__assignment__`` payload from the rest of the options."""
    if isinstance(options, Mapping) and ASSIGNMENT_KEY in options:
        rest = {key: value for key, value in options.items() if key != ASSIGNMENT_KEY}
        return (rest, options[ASSIGNMENT_KEY])
    return (options, None)


@dataclass(frozen=True)
class Customization:
    """A canonical customization: display name plus per-unit price delta."""

    name: str
    price: float = 0.0


@dataclass(frozen=True)
class Assignee:
    """A team member a cart line is attributed to."""

    name: str
    id: str | None = None


@dataclass(frozen=True)
class AssignmentMeta:
    """Who a cart line is for: member ids, display names and extra units."""

    member_ids: tuple[str, ...] = ()
    display_names: tuple[str, ...] = ()
    extra_count: int = 0

    @classmethod
    def from_mapping(cls, raw: Any) -> AssignmentMeta | None:
        """Parse stored assignment metadata, or return None when absent."""
        if isinstance(raw, AssignmentMeta):
            return raw
        if not isinstance(raw, Mapping):
            return None

        member_ids = raw.get("member_ids")
        if not isinstance(member_ids, (list, tuple, set, frozenset)):
            member_ids = ()
        display_names = raw.get("display_names")
        if not isinstance(display_names, (list, tuple)):
            display_names = ()

        # extra_count wins over extras_count, which wins over a legacy extras array.
        if raw.get("extra_count") is not None:
            extra_count = coerce_int(raw.get("extra_count"))
        elif raw.get("extras_count") is not None:
            extra_count = coerce_int(raw.get("extras_count"))
        elif isinstance(raw.get("extras"), (list, tuple)):
            extra_count = len(raw["extras"])
        else:
            extra_count = 0

        return cls(
            member_ids=tuple(str(member_id) for member_id in member_ids if member_id),
            display_names=tuple(str(name) if name else "" for name in display_names),
            extra_count=max(0, extra_count),
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "member_ids": list(self.member_ids),
            "display_names": list(self.display_names),
            "extra_count": self.extra_count,
        }


@dataclass
class CartItem:
    """One line of a shared cart as read from the store."""

    name: str = DEFAULT_ITEM_NAME
    quantity: int = 1
    id: str | None = None
    menu_item_id: str | None = None
    price: float = 0.0
    customized_price: float | None = None
    customizations: list[Customization] = field(default_factory=list)
    options: Any = None
    assignment: AssignmentMeta | None = None
    special_instructions: str = ""
    assigned_to: list[Assignee] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: Any) -> CartItem:
        """Build an item from a stored record; tolerates camelCase and snake_case keys."""
        if isinstance(record, CartItem):
            return record
        if not isinstance(record, Mapping):
            logger.debug("ignoring non-mapping cart record of type %s", type(record).__name__)
            return cls()

        raw_options = _first_present(record, "options", "selectedOptions", "selected_options")
        options, legacy_assignment = split_assignment(raw_options)
        raw_assignment = record.get("assignment")
        if raw_assignment is None:
            raw_assignment = legacy_assignment

        customized_price = _first_present(record, "customizedPrice", "customized_price")

        return cls(
            name=str(_first_present(record, "name", "item_name") or DEFAULT_ITEM_NAME),
            quantity=coerce_int(record.get("quantity"), default=1),
            id=_optional_id(record.get("id")),
            menu_item_id=_optional_id(_first_present(record, "menuItemId", "menu_item_id", "product_id")),
            price=coerce_number(record.get("price")),
            customized_price=coerce_number(customized_price) if customized_price is not None else None,
            customizations=_parse_customizations(record.get("customizations")),
            options=options,
            assignment=AssignmentMeta.from_mapping(raw_assignment),
            special_instructions=str(_first_present(record, "specialInstructions", "special_instructions") or ""),
            assigned_to=_parse_assignees(_first_present(record, "assignedTo", "assigned_to")),
        )


def _optional_id(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _parse_customizations(raw: Any) -> list[Customization]:
    if not isinstance(raw, (list, tuple)):
        return []
    parsed: list[Customization] = []
    for entry in raw:
        if isinstance(entry, Customization):
            parsed.append(entry)
            continue
        if not isinstance(entry, Mapping):
            continue
        # Blank names still carry a price.
        name = str(entry.get("name") or "").strip()
        parsed.append(Customization(name=name, price=coerce_number(entry.get("price"))))
    return parsed


def _parse_assignees(raw: Any) -> list[Assignee]:
    if not isinstance(raw, (list, tuple)):
        return []
    parsed: list[Assignee] = []
    for entry in raw:
        if isinstance(entry, Assignee):
            parsed.append(entry)
        elif isinstance(entry, Mapping):
            parsed.append(Assignee(name=str(entry.get("name") or ""), id=_optional_id(entry.get("id"))))
    return parsed


@dataclass(frozen=True)
class UnitPlan:
    """Units per assignee name plus the unattributed extras for one cart line."""

    units_by_name: dict[str, int]
    extras: int = 0

    @property
    def total(self) -> int:
        return sum(self.units_by_name.values()) + self.extras


@dataclass(frozen=True)
class UnitRow:
    """One physical unit of a cart line, as shown in receipts and detail tables."""

    assignee: str
    item_name: str
    customizations: str
    special: str
    unit_price: float
    source_id: str
    type: str = ROW_TYPE_MEMBER
    line_no: int | None = None
