"""Rich renderables for cart lines, unit rows and team summaries."""

from __future__ import annotations

from rich.table import Table
from rich.text import Text

from teamcart.assignment import plan_item_units
from teamcart.constant import EXTRA_LABEL, ROW_TYPE_EXTRA, UNASSIGNED_LABEL
from teamcart.customizations import compute_unit_price, extract_customizations
from teamcart.models import CartItem, UnitRow
from teamcart.summary import AssignmentSummary, describe_attendees, role_label

_EMPTY_CELL = "-"


def badge_style(assignee: str, row_type: str | None = None) -> str:
    """Return a consistent badge style for assignee tags."""
    if row_type == ROW_TYPE_EXTRA or assignee == EXTRA_LABEL:
        return "bold #ffffff on #2f6db5"
    if assignee == UNASSIGNED_LABEL:
        return "bold #ffffff on #b23a48"
    return "bold #0b1f0f on #5fbf72"


def format_price(amount: float) -> str:
    return f"${amount:.2f}"


def format_item_label(item: CartItem) -> Text:
    """``2x Burrito  $9.50`` followed by who the units are for."""
    plan = plan_item_units(item)
    text = Text()
    text.append(f"{max(1, item.quantity)}x ", style="bold")
    text.append(item.name)
    text.append(f"  {format_price(compute_unit_price(item))}", style="dim")

    people = describe_attendees(plan)
    if people.entries:
        text.append("\n      For: ", style="dim")
        text.append(", ".join(people.entries))

    customizations = extract_customizations(item)
    if customizations:
        text.append("\n      ")
        text.append(customizations, style="italic")
    special = item.special_instructions.strip()
    if special:
        text.append("\n      ")
        text.append(f'"{special}"', style="italic dim")
    return text


def unit_rows_table(rows: list[UnitRow], title: str | None = None) -> Table:
    """Tabular per-unit view; rows are expected sorted and numbered."""
    table = Table(title=title, expand=True, show_lines=False, row_styles=["", "dim"])
    table.add_column("#", justify="right", no_wrap=True)
    table.add_column("Assignee", no_wrap=True)
    table.add_column("Item")
    table.add_column("Customizations", style="italic")
    table.add_column("Special requests", style="italic")
    table.add_column("Unit", justify="right", no_wrap=True)

    for idx, row in enumerate(rows, start=1):
        line_no = row.line_no if row.line_no is not None else idx
        table.add_row(
            str(line_no),
            Text(row.assignee, style=badge_style(row.assignee, row.type)),
            row.item_name,
            row.customizations or _EMPTY_CELL,
            row.special or _EMPTY_CELL,
            format_price(row.unit_price),
        )
    return table


def format_assignment_summary(summary: AssignmentSummary) -> Text:
    """Header count plus one line per role group."""
    text = Text()
    text.append(f"{summary.member_count}", style="bold")
    text.append(" on order")
    if summary.extras_total > 0:
        suffix = "" if summary.extras_total == 1 else "s"
        text.append(f" + {summary.extras_total} extra{suffix}", style=badge_style(EXTRA_LABEL))

    for role, members in summary.role_groups.items():
        text.append("\n")
        text.append(f"{role_label(role)} ({len(members)})", style="bold")
        for name, count in members:
            text.append(f"\n  {name}")
            text.append(f"  {count} item{'' if count == 1 else 's'}", style="dim")
    return text
