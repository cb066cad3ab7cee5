"""Demo team and cart content used to seed an empty store."""

from __future__ import annotations

from typing import Any

DEMO_TEAM_ID = "demo-team"
DEMO_RESTAURANT_ID = "demo-taqueria"
DEMO_CART_TITLE = "Friday Practice Lunch"

DEMO_ROLES_BY_NAME: dict[str, str] = {
    "Alice Moreno": "head_coach",
    "Bob Chen": "player",
    "Carol Diaz": "player",
    "Dev Patel": "trainer",
    "Émile Roux": "captain",
}

DEMO_ITEMS: list[dict[str, Any]] = [
    {
        "name": "Carne Asada Burrito",
        "menu_item_id": "burrito-asada",
        "quantity": 3,
        "unit_price": 11.5,
        "customizations": [{"name": "Extra cheese", "price": 1.5}, {"name": "No onions"}],
        "assignment": {"display_names": ["Alice Moreno", "Bob Chen"], "extra_count": 1},
    },
    {
        "name": "Chicken Bowl",
        "menu_item_id": "bowl-chicken",
        "quantity": 4,
        "unit_price": 10.0,
        "options": {"Rice": "Brown rice", "Beans": ["Black beans"], "Salsa": {"label": "Hot", "price_cents": 50}},
        "assignment": {"display_names": ["Carol Diaz", "Émile Roux"], "extra_count": 0},
    },
    {
        "name": "Chips & Guac",
        "menu_item_id": "chips-guac",
        "quantity": 2,
        "unit_price": 4.25,
        "special_instructions": "Guac on the side",
    },
    {
        "name": "Veggie Tacos",
        "menu_item_id": "tacos-veggie",
        "quantity": 1,
        "unit_price": 9.0,
        # Saved before the quantity was lowered to one.
        "options": {"__assignment__": {"display_names": ["Dev Patel", "Bob Chen"], "extras_count": 2}},
    },
]
