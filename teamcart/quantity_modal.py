"""Quantity entry modal screen."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

MAX_QUANTITY = 99
_DIGITS = "0123456789"


def parse_quantity(value: str) -> tuple[int | None, str]:
    """Validate typed digits; returns (quantity, error message)."""
    if not value:
        return (None, "Quantity is required.")
    if not all(ch in _DIGITS for ch in value):
        return (None, "Digits only.")
    parsed = int(value)
    if not (1 <= parsed <= MAX_QUANTITY):
        return (None, f"Quantity must be between 1 and {MAX_QUANTITY}.")
    return (parsed, "")


class QuantityModal(ModalScreen[int | None]):
    """Prompt for a new quantity for the selected cart line."""

    CSS = """
    QuantityModal {
        align: center middle;
        background: $background 60%;
    }

    #quantity-dialog {
        width: 56;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #quantity-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #quantity-value {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }

    #quantity-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #quantity-help {
        color: #dddddd;
    }
    """

    def __init__(self, item_name: str, current: int) -> None:
        super().__init__()
        self.item_name = item_name
        self.value = str(current)
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="quantity-dialog"):
            yield Static(f"Quantity: {self.item_name}", id="quantity-title")
            yield Static(id="quantity-value")
            yield Static(id="quantity-error")
            yield Static("Digits only. Enter confirm. Backspace delete. Esc/q/Ctrl+C cancel.", id="quantity-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "q", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            quantity, self.error = parse_quantity(self.value)
            if quantity is None:
                self._refresh_content()
            else:
                self.dismiss(quantity)
            event.stop()
            return

        if event.key == "backspace":
            if self.value:
                self.value = self.value[:-1]
                self.error = ""
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character and event.character in _DIGITS:
            if len(self.value) < 2:
                self.value += event.character
            self.error = ""
            self._refresh_content()
            event.stop()

    def _refresh_content(self) -> None:
        self.query_one("#quantity-value", Static).update(self.value or "")
        self.query_one("#quantity-error", Static).update(self.error or "")
