"""Entry point for the team-cart Textual app."""

from __future__ import annotations

import logging
import sys

from teamcart.cart_app import TeamCartApp
from teamcart.config import DEBUG_LOG_PATH
from teamcart.data import DEMO_CART_TITLE, DEMO_ITEMS, DEMO_RESTAURANT_ID, DEMO_ROLES_BY_NAME, DEMO_TEAM_ID
from teamcart.persistence import add_item, bootstrap_schema, ensure_cart, get_cart_snapshot


def seed_demo_cart(db_path: str | None = None) -> str:
    """Return the demo cart id, filling it with sample lines when empty."""
    bootstrap_schema(db_path)
    cart_id = ensure_cart(DEMO_TEAM_ID, DEMO_RESTAURANT_ID, title=DEMO_CART_TITLE, db_path=db_path)
    snapshot = get_cart_snapshot(cart_id, db_path=db_path)
    if snapshot is not None and snapshot.items:
        return cart_id
    for entry in DEMO_ITEMS:
        add_item(cart_id, db_path=db_path, **entry)
    return cart_id


def main() -> None:
    """Run the Textual application on the cart given as first argument, or the demo cart."""
    # The terminal belongs to Textual; library logs go to the debug log file.
    logging.basicConfig(filename=DEBUG_LOG_PATH, level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    if len(sys.argv) > 1:
        TeamCartApp(sys.argv[1]).run()
        return
    TeamCartApp(seed_demo_cart(), roles_by_name=DEMO_ROLES_BY_NAME).run()


if __name__ == "__main__":
    main()
