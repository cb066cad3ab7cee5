"""Cart details modal: one table row per physical unit."""

from __future__ import annotations

from rich.console import Group
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Static

from teamcart.models import CartItem
from teamcart.rendering import unit_rows_table
from teamcart.rows import unit_rows_for_display
from teamcart.summary import cart_plan, describe_attendees


class OrderItemsModal(ModalScreen[None]):
    """Centered modal listing every unit of the cart by assignee."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("ctrl+c", "close", "Close"),
    ]

    CSS = """
    OrderItemsModal {
        align: center middle;
        background: $background 60%;
    }

    #order-items-dialog {
        width: 90%;
        height: auto;
        max-height: 90%;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #order-items-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #order-items-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    def __init__(self, items: list[CartItem]) -> None:
        super().__init__()
        self.items = items

    def compose(self) -> ComposeResult:
        with Container(id="order-items-dialog"):
            yield Static("Cart Details", id="order-items-title")
            yield Static(id="order-items-body")
            yield Static("Esc / q / Ctrl+C to close", id="order-items-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def action_close(self) -> None:
        self.dismiss()

    def _refresh_content(self) -> None:
        body = self.query_one("#order-items-body", Static)
        rows = unit_rows_for_display(self.items)
        if not rows:
            body.update("No items yet.")
            return

        people = describe_attendees(cart_plan(self.items))
        header = Text()
        header.append(f"{people.total} meals", style="bold")
        if people.summary:
            header.append(f"  ({people.summary})", style="dim")
        body.update(Group(header, unit_rows_table(rows)))
