"""
Tests for the text grammar: "5 keys, 2.33 ref".

Run: pytest tests/ -v
"""

from __future__ import annotations

import pytest

from tf2_currencies.constants import CURRENCY_MAX
from tf2_currencies.exceptions import MalformedTextError, OutOfRangeError
from tf2_currencies.models import Amount, ApproxAmount
from tf2_currencies.text import format_amount, format_approx, format_metal, parse, parse_approx


# ═══════════════════════════════════════════════════════════════════════
# FORMATTING
# ═══════════════════════════════════════════════════════════════════════


class TestFormat:
    def test_keys_and_metal(self):
        assert format_amount(Amount(keys=5, units=42)) == "5 keys, 2.33 ref"

    def test_zero_prints_both_clauses(self):
        assert format_amount(Amount()) == "0 keys, 0 ref"

    def test_keys_only(self):
        assert format_amount(Amount(keys=5)) == "5 keys"

    def test_single_key_still_plural(self):
        assert format_amount(Amount(keys=1)) == "1 keys"

    def test_metal_only(self):
        assert format_amount(Amount(units=36)) == "2 ref"

    def test_just_below_one_refined(self):
        assert format_amount(Amount(units=17)) == "0.94 ref"
        assert format_amount(Amount(units=18)) == "1 ref"

    def test_negative(self):
        assert format_amount(Amount(keys=-2, units=-9)) == "-2 keys, -0.50 ref"

    def test_format_metal(self):
        assert format_metal(42) == "2.33"
        assert format_metal(0) == "0"
        assert format_metal(720) == "40"


# ═══════════════════════════════════════════════════════════════════════
# PARSING
# ═══════════════════════════════════════════════════════════════════════


class TestParse:
    def test_keys_and_metal(self):
        assert parse("5 keys, 2.33 ref") == Amount(keys=5, units=42)

    def test_zero_forms(self):
        assert parse("0 keys") == Amount()
        assert parse("0 keys, 0 ref") == Amount()
        assert parse("0 ref") == Amount()

    def test_metal_only(self):
        assert parse("2.33 ref") == Amount(units=42)

    def test_singular_key(self):
        assert parse("1 key") == Amount(keys=1)

    def test_case_and_whitespace_tolerant(self):
        assert parse("  5 KEYS,2.33 Ref ") == Amount(keys=5, units=42)

    def test_no_space_before_unit(self):
        assert parse("5keys, 2ref") == Amount(keys=5, units=36)

    def test_negative_values(self):
        assert parse("-2 keys, -0.5 ref") == Amount(keys=-2, units=-9)

    def test_rounds_metal_to_nearest_weapon(self):
        assert parse("1.33 ref") == Amount(units=24)
        assert parse("0.94 ref") == Amount(units=17)

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "   ",
            "1.5 keys",
            "5 keys, 2 ref, 1 ref",
            "2 ref, 5 keys",
            "2 ref, 3 ref",
            "5 bananas",
            "keys",
            "5 keys,",
            "five keys",
            "1,000 ref",
        ],
    )
    def test_malformed(self, text: str):
        with pytest.raises(MalformedTextError) as exc_info:
            parse(text)
        assert exc_info.value.code == "MALFORMED_TEXT"

    def test_keys_out_of_range(self):
        with pytest.raises(OutOfRangeError):
            parse(f"{CURRENCY_MAX + 1} keys")

    def test_metal_out_of_range(self):
        with pytest.raises(OutOfRangeError):
            parse(f"{CURRENCY_MAX} ref")

    @pytest.mark.parametrize(
        "text",
        [
            "1" * 5000 + " keys",
            "1" * 5000 + " ref",
            "0." + "1" * 5000 + " ref",
        ],
    )
    def test_oversized_numbers_are_malformed(self, text: str):
        with pytest.raises(MalformedTextError):
            parse(text)
        with pytest.raises(MalformedTextError):
            parse_approx(text)


# ═══════════════════════════════════════════════════════════════════════
# ROUND TRIP
# ═══════════════════════════════════════════════════════════════════════


class TestRoundTrip:
    def test_every_weapon_count_around_zero_survives(self):
        for units in range(-40, 41):
            amount = Amount(keys=3, units=units)
            assert parse(format_amount(amount)) == amount

    def test_str_parses_back(self):
        amount = Amount(keys=12, units=19)
        assert parse(str(amount)) == amount


# ═══════════════════════════════════════════════════════════════════════
# APPROXIMATE TEXT
# ═══════════════════════════════════════════════════════════════════════


class TestApproxText:
    def test_parse_fractional_keys(self):
        approx = parse_approx("1.5 keys, 2.33 ref")
        assert approx.keys == pytest.approx(1.5)
        assert approx.metal == pytest.approx(2.33)

    def test_parse_approx_rejects_bad_grammar(self):
        with pytest.raises(MalformedTextError):
            parse_approx("1.5 bananas")

    def test_format_approx(self):
        assert format_approx(ApproxAmount(keys=1.5, metal=2.33)) == "1.50 keys, 2.33 ref"
        assert format_approx(ApproxAmount(keys=2.0)) == "2 keys"
        assert str(ApproxAmount()) == "0 keys, 0 ref"

    def test_format_approx_rounded_zero_has_no_sign(self):
        assert format_approx(ApproxAmount(metal=-0.001)) == "0 ref"
        assert format_approx(ApproxAmount(keys=-0.004, metal=1.0)) == "0 keys, 1 ref"
        assert format_approx(ApproxAmount(metal=-0.5)) == "-0.50 ref"
