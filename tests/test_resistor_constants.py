"""
Tests for the shared colour table (resistor_constants.py).
"""

import dataclasses
import unittest

from resistor_constants import (
    NONE,
    RESISTOR_COLORS,
    BandRole,
    band_roles,
    colors_for_role,
    digit_color,
    find_color,
    multiplier_color,
)


def _names(entries):
    return [e.name for e in entries]


class TestBandRoles(unittest.TestCase):

    def test_four_band_layout(self):
        self.assertEqual(
            band_roles(4),
            (BandRole.DIGIT1, BandRole.DIGIT2, BandRole.MULTIPLIER, BandRole.TOLERANCE),
        )

    def test_five_band_layout_has_third_digit(self):
        self.assertEqual(band_roles(5)[2], BandRole.DIGIT3)
        self.assertEqual(len(band_roles(5)), 5)

    def test_six_band_layout_ends_with_tcr(self):
        self.assertEqual(band_roles(6)[-1], BandRole.TCR)

    def test_unsupported_band_count_raises(self):
        for count in (0, 3, 7):
            with self.assertRaises(ValueError):
                band_roles(count)


class TestColorsForRole(unittest.TestCase):

    def test_first_digit_excludes_black(self):
        names = _names(colors_for_role(BandRole.DIGIT1))
        self.assertNotIn("Black", names)
        self.assertEqual(names[0], "Brown")
        self.assertEqual(len(names), 9)

    def test_other_digits_include_black(self):
        for role in (BandRole.DIGIT2, BandRole.DIGIT3):
            names = _names(colors_for_role(role))
            self.assertEqual(names[0], "Black")
            self.assertEqual(len(names), 10)

    def test_multiplier_order(self):
        self.assertEqual(
            _names(colors_for_role(BandRole.MULTIPLIER)),
            ["Black", "Brown", "Red", "Orange", "Yellow", "Green", "Blue",
             "Violet", "Grey", "White", "Gold", "Silver"],
        )

    def test_tolerance_includes_none_sentinel(self):
        self.assertEqual(
            _names(colors_for_role(BandRole.TOLERANCE)),
            ["None", "Brown", "Red", "Green", "Blue", "Violet", "Grey", "Gold", "Silver"],
        )

    def test_tcr_colours(self):
        names = _names(colors_for_role(BandRole.TCR))
        self.assertEqual(names[0], "Black")
        self.assertNotIn("White", names)
        self.assertNotIn("Gold", names)
        self.assertEqual(len(names), 9)


class TestColorEntry(unittest.TestCase):

    def test_black_is_a_digit_colour_with_value_zero(self):
        black = RESISTOR_COLORS["Black"]
        self.assertEqual(black.digit, 0)
        self.assertTrue(black.has_role(BandRole.DIGIT2))
        self.assertTrue(black.has_role(BandRole.MULTIPLIER))
        self.assertFalse(black.has_role(BandRole.TOLERANCE))

    def test_gold_has_only_multiplier_and_tolerance(self):
        gold = RESISTOR_COLORS["Gold"]
        self.assertEqual(gold.roles, frozenset({BandRole.MULTIPLIER, BandRole.TOLERANCE}))
        self.assertEqual(gold.multiplier, 0.1)
        self.assertEqual(gold.tolerance, 5.0)

    def test_brown_carries_all_four_roles(self):
        brown = RESISTOR_COLORS["Brown"]
        self.assertEqual((brown.digit, brown.multiplier, brown.tolerance, brown.tcr),
                         (1, 10.0, 1.0, 100.0))

    def test_multiplier_values(self):
        self.assertEqual(RESISTOR_COLORS["Silver"].multiplier, 0.01)
        self.assertEqual(RESISTOR_COLORS["White"].multiplier, 1e9)
        self.assertEqual(RESISTOR_COLORS["Black"].multiplier, 1.0)

    def test_none_sentinel_is_tolerance_only(self):
        self.assertEqual(NONE.roles, frozenset({BandRole.TOLERANCE}))
        self.assertEqual(NONE.tolerance, 20.0)
        self.assertIsNone(NONE.rgb)
        self.assertTrue(NONE.is_unset)
        self.assertFalse(RESISTOR_COLORS["Red"].is_unset)

    def test_entries_are_immutable(self):
        with self.assertRaises(dataclasses.FrozenInstanceError):
            RESISTOR_COLORS["Red"].digit = 3

    def test_names_are_unique(self):
        self.assertEqual(len(RESISTOR_COLORS), 13)


class TestLookups(unittest.TestCase):

    def test_find_color_is_case_insensitive(self):
        self.assertIs(find_color("gold"), RESISTOR_COLORS["Gold"])
        self.assertIs(find_color("VIOLET"), RESISTOR_COLORS["Violet"])

    def test_find_color_accepts_gray_spelling(self):
        self.assertIs(find_color("Gray"), RESISTOR_COLORS["Grey"])

    def test_find_color_unknown_raises(self):
        with self.assertRaises(KeyError):
            find_color("Pink")

    def test_digit_color(self):
        self.assertIs(digit_color(4), RESISTOR_COLORS["Yellow"])
        self.assertIsNone(digit_color(10))

    def test_multiplier_color(self):
        self.assertIs(multiplier_color(2), RESISTOR_COLORS["Red"])
        self.assertIs(multiplier_color(-1), RESISTOR_COLORS["Gold"])
        self.assertIsNone(multiplier_color(-3))
        self.assertIsNone(multiplier_color(10))


if __name__ == "__main__":
    unittest.main()
