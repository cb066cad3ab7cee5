"""Unit tests for rich rendering, receipt layout and quantity entry validation."""
from __future__ import annotations

import os
import unittest
from unittest import mock

from rich.console import Console

from teamcart import printer
from teamcart.models import CartItem
from teamcart.printer import ReceiptLine, font_candidates, load_receipt_fonts, receipt_lines
from teamcart.quantity_modal import parse_quantity
from teamcart.rendering import badge_style, format_assignment_summary, format_item_label, format_price, unit_rows_table
from teamcart.rows import unit_rows_for_display
from teamcart.summary import summarize_assignments

CART = [
    {
        "id": "line-1",
        "name": "Burrito",
        "quantity": 2,
        "price": 10,
        "customizations": [{"name": "Extra cheese", "price": 1.5}],
        "assignment": {"display_names": ["Alice"], "extra_count": 1},
    },
    {"id": "line-2", "name": "Soda", "quantity": 1, "price": 2, "specialInstructions": "no ice"},
]


def _render(renderable: object) -> str:
    console = Console(record=True, width=140, color_system=None)
    console.print(renderable)
    return console.export_text()


class RenderingTests(unittest.TestCase):
    def test_unit_rows_table_lists_every_unit(self) -> None:
        output = _render(unit_rows_table(unit_rows_for_display(CART)))
        for expected in ("Assignee", "Alice", "Unassigned", "Extra", "Extra cheese (+$1.50)", "no ice", "$11.50"):
            self.assertIn(expected, output)

    def test_item_label_shows_people_and_customizations(self) -> None:
        label = format_item_label(CartItem.from_record(CART[0])).plain
        self.assertIn("2x Burrito", label)
        self.assertIn("For: Alice, Extra (x1)", label)
        self.assertIn("Extra cheese (+$1.50)", label)

    def test_assignment_summary_text(self) -> None:
        text = format_assignment_summary(summarize_assignments(CART, {"Alice": "coach"})).plain
        self.assertTrue(text.startswith("1 on order + 1 extra"))
        self.assertIn("Coach (1)", text)
        self.assertIn("Alice", text)

    def test_badge_styles_differ_by_bucket(self) -> None:
        styles = {badge_style("Alice"), badge_style("Extra", "extra"), badge_style("Unassigned")}
        self.assertEqual(len(styles), 3)

    def test_format_price(self) -> None:
        self.assertEqual(format_price(3), "$3.00")


class ReceiptLinesTests(unittest.TestCase):
    def test_groups_units_by_assignee(self) -> None:
        lines = receipt_lines(unit_rows_for_display(CART), title="Lunch")
        self.assertEqual(
            lines,
            [
                ReceiptLine("Lunch"),
                ReceiptLine("", separator=True),
                ReceiptLine("Alice"),
                ReceiptLine("#1 Burrito  $11.50", compact=True),
                ReceiptLine("    Extra cheese (+$1.50)", compact=True),
                ReceiptLine("", separator=True),
                ReceiptLine("Unassigned"),
                ReceiptLine("#2 Soda  $2.00", compact=True),
                ReceiptLine('    "no ice"', compact=True),
                ReceiptLine("", separator=True),
                ReceiptLine("Extra"),
                ReceiptLine("#3 Burrito  $11.50", compact=True),
                ReceiptLine("    Extra cheese (+$1.50)", compact=True),
            ],
        )

    def test_no_rows_no_lines(self) -> None:
        self.assertEqual(receipt_lines([]), [])


class ParseQuantityTests(unittest.TestCase):
    def test_valid_and_invalid_values(self) -> None:
        self.assertEqual(parse_quantity("3"), (3, ""))
        self.assertEqual(parse_quantity(""), (None, "Quantity is required."))
        self.assertEqual(parse_quantity("0"), (None, "Quantity must be between 1 and 99."))

    def test_non_ascii_digits_are_rejected(self) -> None:
        self.assertEqual(parse_quantity("\u00b2"), (None, "Digits only."))
        self.assertEqual(parse_quantity("1\u0661"), (None, "Digits only."))
        self.assertEqual(parse_quantity("12"), (12, ""))


class ReceiptFontTests(unittest.TestCase):
    def test_override_comes_first_and_repeats_are_dropped(self) -> None:
        fallbacks = ("/fonts/a.ttf", "/fonts/b.ttf", "/fonts/a.ttf")
        with mock.patch.dict(os.environ, {printer.PRINTER_FONT_OVERRIDE_ENV: " /fonts/b.ttf "}), mock.patch.object(
            printer, "PRINTER_FONT_PATH", "/fonts/main.ttf"
        ), mock.patch.object(printer, "_LINUX_FONT_FALLBACKS", fallbacks):
            self.assertEqual(font_candidates(), ("/fonts/b.ttf", "/fonts/main.ttf", "/fonts/a.ttf"))

    def test_blank_override_is_ignored(self) -> None:
        with mock.patch.dict(os.environ, {printer.PRINTER_FONT_OVERRIDE_ENV: "  "}), mock.patch.object(
            printer, "_LINUX_FONT_FALLBACKS", ()
        ):
            self.assertEqual(font_candidates(), (printer.PRINTER_FONT_PATH,))

    def test_missing_fonts_raise_runtime_error(self) -> None:
        with mock.patch.object(printer, "font_candidates", return_value=("/nonexistent/font.ttf",)):
            with self.assertRaises(RuntimeError) as ctx:
                load_receipt_fonts()
        self.assertIn("/nonexistent/font.ttf", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
