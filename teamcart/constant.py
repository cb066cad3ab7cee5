"""Reserved keys and fixed labels shared by the cart display helpers."""

from __future__ import annotations

# Key under which older records stash assignment metadata inside the options payload.
ASSIGNMENT_KEY = "__assignment__"

EXTRA_LABEL = "Extra"
UNASSIGNED_LABEL = "Unassigned"
DEFAULT_ITEM_NAME = "Item"

EXTRA_NAME_ALIASES: frozenset[str] = frozenset({"extra", "extras"})

OPTION_NAME_FIELDS: tuple[str, ...] = ("name", "label", "title")

ROW_TYPE_MEMBER = "member"
ROW_TYPE_EXTRA = "extra"

# Preferred role order; unknown roles fall to the end.
ROLE_ORDER: tuple[str, ...] = (
    "head_coach",
    "coach",
    "assistant_coach",
    "trainer",
    "manager",
    "captain",
    "player",
    "staff",
    "volunteer",
    "other",
    "unknown",
)
