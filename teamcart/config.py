"""Runtime configuration defaults for the cart store, debug log and printer."""

from __future__ import annotations

import os

DB_PATH = os.environ.get("TEAMCART_DB_PATH", "data/teamcart.db")
DEBUG_LOG_PATH = os.environ.get("TEAMCART_DEBUG_LOG", "/tmp/teamcart-debug.log")

PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 28
PRINTER_FONT_PATH = "/System/Library/Fonts/SFNS.ttf"
PRINTER_LEFT_INDENT_PX = 12
PRINTER_FONT_OVERRIDE_ENV = "TEAMCART_PRINTER_FONT_PATH"
