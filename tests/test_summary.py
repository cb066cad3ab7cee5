"""Unit tests for team assignment summaries and attendee descriptions."""
from __future__ import annotations

import unittest

from teamcart.models import UnitPlan
from teamcart.summary import cart_plan, describe_attendees, merge_plans, role_label, role_rank, summarize_assignments

ITEMS = [
    {"name": "Burrito", "quantity": 5, "assignedTo": [{"name": "Bob"}, {"name": "Alice"}, {"name": "Bob"}, {"name": "Extra"}]},
    {"name": "Bowl", "quantity": 2, "assignment": {"display_names": ["Alice", "Dev"], "extra_count": 2}},
    {"name": "Soda", "quantity": 3},
]

ROLES = {"alice": "Head_Coach", "Bob": "player", "Dev": "mascot"}


class SummarizeAssignmentsTests(unittest.TestCase):
    def test_counts_items_not_units(self) -> None:
        summary = summarize_assignments(ITEMS, ROLES)
        self.assertEqual(summary.items_count_by_name, {"Bob": 1, "Alice": 2, "Dev": 1})
        self.assertEqual(summary.member_count, 3)
        self.assertEqual(summary.extras_total, 3)

    def test_role_groups_follow_preferred_order(self) -> None:
        summary = summarize_assignments(ITEMS, ROLES)
        self.assertEqual(list(summary.role_groups), ["head_coach", "player", "mascot"])
        self.assertEqual(summary.role_groups["head_coach"], [("Alice", 2)])
        self.assertEqual(summary.role_counts, [("head_coach", 1), ("player", 1), ("mascot", 1)])
        self.assertEqual(summary.names_sorted, ["Alice", "Bob", "Dev"])

    def test_unknown_roles_without_lookup(self) -> None:
        summary = summarize_assignments(ITEMS)
        self.assertEqual(list(summary.role_groups), ["unknown"])
        self.assertEqual([name for name, _ in summary.role_groups["unknown"]], ["Alice", "Bob", "Dev"])

    def test_empty_cart(self) -> None:
        summary = summarize_assignments(None)
        self.assertEqual(summary.member_count, 0)
        self.assertEqual(summary.role_groups, {})

    def test_role_helpers(self) -> None:
        self.assertEqual(role_label("assistant_coach"), "Assistant Coach")
        self.assertEqual(role_label(""), "Unknown")
        self.assertLess(role_rank("coach"), role_rank("player"))
        self.assertGreater(role_rank("mascot"), role_rank("unknown"))


class AttendeeTests(unittest.TestCase):
    def test_describe_attendees(self) -> None:
        plan = UnitPlan(units_by_name={"Alice": 2, "Unassigned": 3, "Bob": 1}, extras=1)
        people = describe_attendees(plan)
        self.assertEqual(people.entries, ["Alice (x2)", "Bob", "Extra (x1)", "Unassigned (x3)"])
        self.assertEqual(people.total, 7)
        self.assertEqual(people.summary, "1 extra • 3 unassigned")

    def test_merge_keeps_first_seen_order(self) -> None:
        merged = merge_plans([UnitPlan({"Bob": 1}, 1), UnitPlan({"Alice": 2, "Bob": 2}, 0)])
        self.assertEqual(list(merged.units_by_name.items()), [("Bob", 3), ("Alice", 2)])
        self.assertEqual(merged.extras, 1)

    def test_cart_plan_totals_every_unit(self) -> None:
        plan = cart_plan(ITEMS)
        self.assertEqual(plan.total, 10)
        self.assertEqual(list(plan.units_by_name.items()), [("Bob", 1), ("Alice", 5), ("Dev", 1), ("Unassigned", 3)])
        self.assertEqual(plan.extras, 0)


if __name__ == "__main__":
    unittest.main()
