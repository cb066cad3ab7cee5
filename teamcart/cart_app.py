"""Main Textual app class."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Header, Static

from teamcart.config import DEBUG_LOG_PATH
from teamcart.models import CartItem
from teamcart.order_items_modal import OrderItemsModal
from teamcart.persistence import bootstrap_schema, get_cart_snapshot, remove_item, update_item
from teamcart.printer import print_unit_rows, printer_status
from teamcart.quantity_modal import QuantityModal
from teamcart.rendering import format_assignment_summary, format_item_label
from teamcart.rows import unit_rows_for_display
from teamcart.summary import summarize_assignments


class TeamCartApp(App):
    """A Textual app for reviewing who each unit of a shared team cart is for."""

    TITLE = "Team Cart"
    SUB_TITLE = "Who is eating what"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #items-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #summary-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #status-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 4;
    }

    #items-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #summary {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    selected_index = reactive(None)

    BINDINGS = [
        ("o", "open_order_items", "Cart details"),
        ("e", "edit_quantity", "Edit quantity"),
        ("x", "remove_selected", "Remove item"),
        Binding("ctrl+s", "print_receipt", "Print", priority=True),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, cart_id: str, roles_by_name: Mapping[str, str] | None = None, db_path: str | None = None) -> None:
        super().__init__()
        self.cart_id = cart_id
        self.roles_by_name = dict(roles_by_name or {})
        self.db_path = db_path
        self.items: list[CartItem] = []
        self.cart_title = "Team Cart"
        self.system_status = ""
        self._debug_log_path = Path(DEBUG_LOG_PATH)
        self._log_debug(f"app_init cart_id={cart_id}")

    def _log_debug(self, message: str) -> None:
        try:
            ts = datetime.now(timezone.utc).isoformat()
            self._debug_log_path.parent.mkdir(parents=True, exist_ok=True)
            with self._debug_log_path.open("a", encoding="utf-8") as fh:
                fh.write(f"{ts} {message}\n")
        except OSError:
            # Logging must never interfere with app flow.
            return

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="items-pane"):
                yield Static("Cart Items", classes="pane-title")
                yield Static("(no items yet)", id="items-list")
            with Vertical(id="summary-pane"):
                yield Static(id="status-bar")
                yield Static("Team Members On Order", classes="pane-title")
                yield Static(id="summary")

    def on_mount(self) -> None:
        bootstrap_schema(self.db_path)
        _, msg = printer_status()
        self.system_status = msg
        self._log_debug(f"on_mount printer_status={msg!r}")
        self._reload()

    def on_key(self, event: Key) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if not event.is_printable or not event.character:
            return

        key = event.character.lower()
        if key == "j":
            self._move_selection(1)
        elif key == "k":
            self._move_selection(-1)
        elif key == "+":
            self._change_quantity(1)
        elif key == "-":
            self._change_quantity(-1)
        else:
            return
        event.stop()

    def action_open_order_items(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        self.push_screen(OrderItemsModal(list(self.items)))

    def action_edit_quantity(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        item = self._selected_item()
        if item is None:
            return

        def _apply(quantity: int | None) -> None:
            if quantity is None:
                return
            self._set_quantity(item, quantity)

        self.push_screen(QuantityModal(item.name, max(1, item.quantity)), _apply)

    def action_remove_selected(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        item = self._selected_item()
        if item is None or item.id is None:
            return
        remove_item(self.cart_id, item.id, db_path=self.db_path)
        self._log_debug(f"remove_item item_id={item.id}")
        self.system_status = f"Removed {item.name}"
        self._reload()

    def action_print_receipt(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        rows = unit_rows_for_display(self.items)
        if not rows:
            self.system_status = "Nothing to print"
            self._refresh_status()
            return
        try:
            print_unit_rows(rows, title=self.cart_title)
        except Exception as exc:
            self.system_status = f"Print failed: {exc}"
            self._refresh_status()
            self._log_debug(f"print_failed cart_id={self.cart_id} error={exc!r}")
            return
        self.system_status = f"Printed {len(rows)} units"
        self._refresh_status()
        self._log_debug(f"printed cart_id={self.cart_id} rows={len(rows)}")

    def _reload(self) -> None:
        snapshot = get_cart_snapshot(self.cart_id, db_path=self.db_path)
        if snapshot is None:
            self.items = []
            self.system_status = f"Cart {self.cart_id[:8]} not found"
        else:
            self.items = list(snapshot.items)
            self.cart_title = snapshot.title
            self.sub_title = f"{snapshot.title} ({snapshot.status})"
        self._log_debug(f"reload cart_id={self.cart_id} items={len(self.items)}")
        self._refresh_all()

    def _change_quantity(self, delta: int) -> None:
        item = self._selected_item()
        if item is None:
            return
        self._set_quantity(item, max(1, item.quantity + delta))

    def _set_quantity(self, item: CartItem, quantity: int) -> None:
        if item.id is None or quantity == item.quantity:
            return
        update_item(self.cart_id, item.id, quantity=quantity, db_path=self.db_path)
        self._log_debug(f"set_quantity item_id={item.id} quantity={quantity}")
        self.system_status = f"{item.name}: quantity {quantity}"
        self._reload()

    def _move_selection(self, delta: int) -> None:
        if not self.items:
            return
        if self.selected_index is None:
            self.selected_index = 0 if delta > 0 else len(self.items) - 1
        else:
            self.selected_index = (self.selected_index + delta) % len(self.items)
        self._refresh_items()

    def _selected_item(self) -> CartItem | None:
        if self.selected_index is None:
            return None
        if not (0 <= self.selected_index < len(self.items)):
            return None
        return self.items[self.selected_index]

    def _refresh_all(self) -> None:
        self._refresh_items()
        self._refresh_summary()
        self._refresh_status()

    def _refresh_items(self) -> None:
        try:
            items_widget = self.query_one("#items-list", Static)
        except NoMatches:
            return
        if not self.items:
            self.selected_index = None
            items_widget.update("(no items yet)")
            return

        if self.selected_index is None:
            self.selected_index = 0
        elif self.selected_index >= len(self.items):
            self.selected_index = len(self.items) - 1

        lines = Text()
        for idx, item in enumerate(self.items):
            if idx > 0:
                lines.append("\n")
            pointer = "➤ " if idx == self.selected_index else "  "
            lines.append(pointer)
            lines.append(f"{idx + 1}. ")
            lines.append_text(format_item_label(item))
        items_widget.update(lines)

    def _refresh_summary(self) -> None:
        try:
            summary_widget = self.query_one("#summary", Static)
        except NoMatches:
            return
        summary_widget.update(format_assignment_summary(summarize_assignments(self.items, self.roles_by_name)))

    def _refresh_status(self) -> None:
        try:
            bar = self.query_one("#status-bar", Static)
        except NoMatches:
            return
        status = self.system_status or "Ready"
        bar.update(f"J/K select, +/- or E quantity, X remove, O details, Ctrl+S print.\n{status}")
