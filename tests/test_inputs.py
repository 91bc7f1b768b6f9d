"""
Tests for lenient numeric parsing of form and spreadsheet values.
"""

import pytest

from app.calculations.inputs import (
    parse_int,
    parse_money,
    parse_number,
    parse_percent,
    parse_rate,
    parse_years,
    pick_number,
)


class TestParseNumber:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            (1200, 1200.0),
            (6.5, 6.5),
            ("$250,000", 250000.0),
            ("6.5%", 6.5),
            ("  1200 ", 1200.0),
            ("-3", -3.0),
        ],
    )
    def test_parses_numbers(self, raw, expected):
        assert parse_number(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", True, float("nan"), float("inf")])
    def test_invalid_values_use_default(self, raw):
        assert parse_number(raw) == 0.0
        assert parse_number(raw, default=5.0) == 5.0


class TestClamping:
    def test_money_is_never_negative(self):
        assert parse_money(-500) == 0.0
        assert parse_money("1,500") == 1500.0

    def test_percent_range(self):
        assert parse_percent(150) == 100.0
        assert parse_percent(-3) == 0.0
        assert parse_percent("8%") == 8.0

    def test_int_counts(self):
        assert parse_int("12.7") == 12
        assert parse_int(-4) == 0
        assert parse_int(None) == 0
        assert parse_int("30000", maximum=100) == 100

    def test_rate_may_be_negative(self):
        assert parse_rate("-2.5%") == -2.5
        assert parse_rate(1e9) == 100.0
        assert parse_rate(-500) == -100.0

    def test_years_keep_fractions(self):
        assert parse_years("2.5", maximum=100) == 2.5
        assert parse_years(-1, maximum=100) == 0.0
        assert parse_years(30000, maximum=100) == 100


class TestPickNumber:
    def test_first_non_zero_key_wins(self):
        row = {"purchasePrice": "", "Purchase Price": "350,000"}
        assert pick_number(row, ("purchasePrice", "Purchase Price")) == 350000.0

    def test_default_when_all_missing(self):
        assert pick_number({}, ("vacancyRate", "Vacancy Rate"), default=5.0) == 5.0
