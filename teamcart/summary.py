"""Team-level summaries: who is on the order, by role, and attendee counts."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from teamcart.assignment import is_extra_name, plan_item_units
from teamcart.constant import EXTRA_LABEL, ROLE_ORDER, UNASSIGNED_LABEL
from teamcart.models import CartItem, UnitPlan
from teamcart.rows import collation_key


@dataclass
class AssignmentSummary:
    """Per-person item counts plus role grouping for a whole cart."""

    items_count_by_name: dict[str, int] = field(default_factory=dict)
    extras_total: int = 0
    role_groups: dict[str, list[tuple[str, int]]] = field(default_factory=dict)

    @property
    def member_count(self) -> int:
        return len(self.items_count_by_name)

    @property
    def role_counts(self) -> list[tuple[str, int]]:
        return [(role, len(members)) for role, members in self.role_groups.items()]

    @property
    def names_sorted(self) -> list[str]:
        return [name for members in self.role_groups.values() for name, _ in members]


@dataclass(frozen=True)
class AttendeeDescription:
    entries: list[str]
    total: int
    summary: str


def role_rank(role: str) -> int:
    try:
        return ROLE_ORDER.index(str(role or "unknown").lower())
    except ValueError:
        return len(ROLE_ORDER)


def role_label(role: str) -> str:
    """``head_coach`` -> ``Head Coach``."""
    words = str(role or "unknown").replace("_", " ").split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)


def _names_for_item(item: CartItem) -> tuple[list[str], int]:
    names: list[str] = []
    extras = 0
    if item.assigned_to:
        for assignee in item.assigned_to:
            name = assignee.name.strip()
            if not name:
                continue
            if is_extra_name(name):
                extras += 1
                continue
            if name not in names:
                names.append(name)
        return (names, extras)

    if item.assignment is not None:
        for raw in item.assignment.display_names:
            name = raw.strip()
            if not name or is_extra_name(name) or name in names:
                continue
            names.append(name)
        extras = item.assignment.extra_count
    return (names, extras)


def summarize_assignments(
    items: Iterable[CartItem | Mapping[str, Any]] | None,
    roles_by_name: Mapping[str, str] | None = None,
) -> AssignmentSummary:
    """
    Count how many cart lines each person is on (quantity is ignored).

    ``roles_by_name`` maps full names to team roles; lookups are
    case-insensitive and unmatched people are grouped under ``unknown``.
    """
    roles = {str(name).strip().lower(): str(role or "unknown").lower() for name, role in (roles_by_name or {}).items()}
    summary = AssignmentSummary()

    for raw_item in items or ():
        names, extras = _names_for_item(CartItem.from_record(raw_item))
        summary.extras_total += extras
        for name in names:
            summary.items_count_by_name[name] = summary.items_count_by_name.get(name, 0) + 1

    grouped: dict[str, list[tuple[str, int]]] = {}
    for name, count in summary.items_count_by_name.items():
        role = roles.get(name.lower(), "unknown")
        grouped.setdefault(role, []).append((name, count))

    for role in sorted(grouped, key=lambda r: (role_rank(r), r)):
        summary.role_groups[role] = sorted(grouped[role], key=lambda entry: (collation_key(entry[0]), entry[0]))
    return summary


def merge_plans(plans: Iterable[UnitPlan]) -> UnitPlan:
    """Add up unit plans across cart lines, keeping first-seen name order."""
    units: dict[str, int] = {}
    extras = 0
    for plan in plans:
        for name, count in plan.units_by_name.items():
            units[name] = units.get(name, 0) + count
        extras += plan.extras
    return UnitPlan(units_by_name=units, extras=extras)


def cart_plan(items: Iterable[CartItem | Mapping[str, Any]] | None) -> UnitPlan:
    return merge_plans(plan_item_units(item) for item in items or ())


def describe_attendees(plan: UnitPlan) -> AttendeeDescription:
    """People entries like ``Alice (x2)``, then ``Extra`` and ``Unassigned`` buckets."""
    entries: list[str] = []
    unassigned = 0
    for name, count in plan.units_by_name.items():
        if name == UNASSIGNED_LABEL:
            unassigned += count
            continue
        entries.append(f"{name} (x{count})" if count > 1 else name)
    if plan.extras > 0:
        entries.append(f"{EXTRA_LABEL} (x{plan.extras})")
    if unassigned > 0:
        entries.append(f"{UNASSIGNED_LABEL} (x{unassigned})")

    parts: list[str] = []
    if plan.extras > 0:
        parts.append(f"{plan.extras} extra{'' if plan.extras == 1 else 's'}")
    if unassigned > 0:
        parts.append(f"{unassigned} unassigned")
    return AttendeeDescription(entries=entries, total=plan.total, summary=" • ".join(parts))
