"""Thermal receipt printing of per-unit cart rows."""

from __future__ import annotations

import os
from dataclasses import dataclass

from teamcart.config import (
    PRINTER_FONT_OVERRIDE_ENV,
    PRINTER_FONT_PATH,
    PRINTER_FONT_SIZE,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    PRINTER_WIDTH_PX,
)
from teamcart.models import UnitRow
from teamcart.rendering import format_price

_RULE_BAND_PX = 14
_RULE_WEIGHT_PX = 3
_FEED_LINES = 3
_LINUX_FONT_FALLBACKS = (
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
)


@dataclass(frozen=True)
class ReceiptLine:
    text: str
    compact: bool = False
    separator: bool = False


def receipt_lines(rows: list[UnitRow], title: str | None = None) -> list[ReceiptLine]:
    """
    Lay out sorted, numbered rows as receipt lines grouped by assignee.

    Each assignee gets a header line and a separator; each unit prints as
    ``#n Item  $x.xx`` with customizations and special requests as compact
    lines underneath.
    """
    lines: list[ReceiptLine] = []
    if title:
        lines.append(ReceiptLine(title))

    current: str | None = None
    for idx, row in enumerate(rows, start=1):
        if row.assignee != current:
            if current is not None or title:
                lines.append(ReceiptLine("", separator=True))
            lines.append(ReceiptLine(row.assignee))
            current = row.assignee
        line_no = row.line_no if row.line_no is not None else idx
        lines.append(ReceiptLine(f"#{line_no} {row.item_name}  {format_price(row.unit_price)}", compact=True))
        if row.customizations:
            lines.append(ReceiptLine(f"    {row.customizations}", compact=True))
        if row.special:
            lines.append(ReceiptLine(f'    "{row.special}"', compact=True))
    return lines


def font_candidates() -> tuple[str, ...]:
    """Font files to try, env override first, without repeats."""
    ordered = [os.environ.get(PRINTER_FONT_OVERRIDE_ENV, "").strip(), PRINTER_FONT_PATH, *_LINUX_FONT_FALLBACKS]
    return tuple(dict.fromkeys(path for path in ordered if path))


def load_receipt_fonts() -> tuple[object, object]:
    """Return the (heading, detail) fonts from the first loadable candidate."""
    from PIL import ImageFont

    detail_size = max(10, int(PRINTER_FONT_SIZE * 0.7))
    candidates = font_candidates()
    for path in candidates:
        try:
            return ImageFont.truetype(path, PRINTER_FONT_SIZE), ImageFont.truetype(path, detail_size)
        except OSError:
            continue
    raise RuntimeError(f"No receipt font could be loaded; set {PRINTER_FONT_OVERRIDE_ENV}. Tried: {', '.join(candidates)}")


def printer_status() -> tuple[bool, str]:
    """Report whether a receipt could be printed right now (short of the USB handshake)."""
    try:
        import escpos.printer  # noqa: F401

        load_receipt_fonts()
    except (ImportError, RuntimeError) as exc:
        return (False, f"Printing disabled: {exc}")
    return (True, "Printer ready")


def _line_image(line: ReceiptLine, heading_font: object, detail_font: object) -> object:
    from PIL import Image, ImageDraw

    if line.separator:
        img = Image.new("1", (PRINTER_WIDTH_PX, _RULE_BAND_PX), color=1)
        top = (_RULE_BAND_PX - _RULE_WEIGHT_PX) // 2
        ImageDraw.Draw(img).rectangle((0, top, PRINTER_WIDTH_PX - 1, top + _RULE_WEIGHT_PX - 1), fill=0)
        return img

    font = detail_font if line.compact else heading_font
    left, top, _, bottom = font.getbbox(line.text or " ")
    floor = 12 if line.compact else PRINTER_FONT_SIZE + 12
    height = max(floor, bottom - top + 8)
    img = Image.new("1", (PRINTER_WIDTH_PX, height), color=1)
    ImageDraw.Draw(img).text(
        (PRINTER_LEFT_INDENT_PX - left, (height - (bottom - top)) // 2 - top), line.text, font=font, fill=0
    )
    return img


def print_unit_rows(rows: list[UnitRow], title: str | None = None) -> None:
    """Print all unit rows grouped by assignee and cut the ticket at the end."""
    if not rows:
        return

    try:
        from escpos.printer import Usb
    except ImportError as exc:
        raise RuntimeError(f"python-escpos is not installed: {exc}") from exc

    heading_font, detail_font = load_receipt_fonts()
    printer = Usb(PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)
    for line in receipt_lines(rows, title=title):
        printer.image(_line_image(line, heading_font, detail_font))
    printer.ln(_FEED_LINES)
    printer.cut()
