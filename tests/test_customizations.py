"""
Unit tests for customization text and unit prices.

Covers:
- Priced customization lists and their text.
- Every stored option shape (strings, scalars, lists, option objects, groups).
- The reserved assignment key never leaking into the text.
- Malformed input degrading to an empty string.
"""
from __future__ import annotations

import unittest

from teamcart.customizations import (
    compute_unit_price,
    extract_customizations,
    format_customization,
    normalize_options,
)
from teamcart.models import CartItem, Customization


class ExtractCustomizationsTests(unittest.TestCase):
    def test_priced_customizations(self) -> None:
        item = {"customizations": [{"name": "Extra cheese", "price": 1.5}, {"name": "No onions"}]}
        self.assertEqual(extract_customizations(item), "Extra cheese (+$1.50), No onions")

    def test_blank_customization_names_are_dropped(self) -> None:
        item = {"customizations": [{"name": "  "}, {"name": "Well done", "price": 0}]}
        self.assertEqual(extract_customizations(item), "Well done")

    def test_blank_only_customizations_do_not_fall_back_to_options(self) -> None:
        item = {"customizations": [{"name": " ", "price": 2}], "selectedOptions": {"Size": "Small"}}
        self.assertEqual(extract_customizations(item), "")

    def test_customizations_take_precedence_over_options(self) -> None:
        item = {"customizations": [{"name": "Large"}], "selectedOptions": {"Size": "Small"}}
        self.assertEqual(extract_customizations(item), "Large")

    def test_mapping_options_of_every_shape(self) -> None:
        item = {
            "selected_options": {
                "Rice": "Brown rice",
                "Beans": ["Black beans", {"name": "Pinto", "price": 0.5}],
                "Salsa": {"label": "Hot", "price_cents": 50},
                "Spicy": True,
                "Count": 2,
            }
        }
        self.assertEqual(
            extract_customizations(item),
            "Brown rice, Black beans, Pinto (+$0.50), Hot (+$0.50), Spicy: true, Count: 2",
        )

    def test_assignment_key_is_never_a_customization(self) -> None:
        item = {
            "selectedOptions": {
                "__assignment__": {"display_names": ["Alice"], "extra_count": 1},
                "Drink": "Lemonade",
            }
        }
        self.assertEqual(extract_customizations(item), "Lemonade")

    def test_nameless_group_is_flattened_to_strings(self) -> None:
        item = {"selectedOptions": {"Sides": {"first": "Fries", "qty": 3, "second": "Slaw"}}}
        self.assertEqual(extract_customizations(item), "Fries, Slaw")

    def test_list_options_use_indices_as_keys(self) -> None:
        item = {"selectedOptions": ["No ice", {"title": "Large"}, None, 4]}
        self.assertEqual(extract_customizations(item), "No ice, Large, 3: 4")

    def test_title_is_used_when_name_and_label_missing(self) -> None:
        self.assertEqual(normalize_options({"Size": [{"title": "XL", "price": "2"}]}), [Customization("XL", 2.0)])

    def test_malformed_input_degrades_to_empty(self) -> None:
        for item in (None, "burrito", 42, {}, {"selectedOptions": "junk"}, {"customizations": "junk"}):
            with self.subTest(item=item):
                self.assertEqual(extract_customizations(item), "")

    def test_integral_float_renders_without_fraction(self) -> None:
        self.assertEqual(extract_customizations({"selectedOptions": {"Scoops": 2.0}}), "Scoops: 2")

    def test_format_customization(self) -> None:
        self.assertEqual(format_customization(Customization("Bacon", 2)), "Bacon (+$2.00)")
        self.assertEqual(format_customization(Customization("Plain")), "Plain")


class ComputeUnitPriceTests(unittest.TestCase):
    def test_customized_price_wins_over_price(self) -> None:
        item = {"price": 10, "customizedPrice": 12, "customizations": [{"name": "Bacon", "price": 1.5}]}
        self.assertAlmostEqual(compute_unit_price(item), 13.5)

    def test_price_plus_customizations_per_unit(self) -> None:
        item = CartItem(
            name="Burger",
            quantity=4,
            price=8.0,
            customizations=[Customization("Cheese", 1.0), Customization("Bacon", 2.0)],
        )
        self.assertAlmostEqual(compute_unit_price(item), 11.0)

    def test_blank_named_customizations_still_add_their_price(self) -> None:
        self.assertEqual(compute_unit_price({"price": 5, "customizations": [{"name": "", "price": 2}]}), 7.0)
        item = {"price": 5, "customizations": [{"name": "  ", "price": 2}, {"name": "Guac", "price": 1.25}]}
        self.assertAlmostEqual(compute_unit_price(item), 8.25)
        self.assertEqual(extract_customizations(item), "Guac (+$1.25)")

    def test_missing_prices_are_zero(self) -> None:
        self.assertEqual(compute_unit_price({}), 0.0)
        self.assertEqual(compute_unit_price({"price": "n/a"}), 0.0)

    def test_option_prices_do_not_change_unit_price(self) -> None:
        item = {"price": 5, "selectedOptions": {"Salsa": {"name": "Hot", "price": 1}}}
        self.assertEqual(compute_unit_price(item), 5.0)


if __name__ == "__main__":
    unittest.main()
