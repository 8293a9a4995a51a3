from __future__ import annotations

from datetime import datetime

import pytest

from drawsheet.models.config_models import HeuristicsConfig
from drawsheet.services.column_analyzer import analyze_column_data, classify_value


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, (None, False)),
        ("   ", (None, False)),
        (float("nan"), (None, False)),
        (1250, ("number", True)),
        (0, ("number", False)),
        (12.5, ("number", True)),
        ("$1,250.00", ("currency", True)),
        ("(1,250)", ("currency", True)),
        ("-$300", ("currency", True)),
        ("$0.00", ("currency", False)),
        ("12/31/2024", ("date", False)),
        ("2024-01-15", ("date", False)),
        (datetime(2024, 1, 15), ("date", False)),
        (" - ", ("placeholder", False)),
        ("-", ("placeholder", False)),
        ("Framing", ("text", False)),
        (True, ("text", False)),
    ],
)
def test_classify_value(value, expected):
    assert classify_value(value) == expected


def test_placeholder_column_has_no_real_numbers():
    values = ["-"] * 25 + [1500, 2200]
    profile = analyze_column_data(values)
    assert profile.valid_count == 27
    assert profile.placeholder_count == 25
    assert profile.real_number_count == 2
    assert profile.is_numeric is True
    assert profile.has_real_numbers is False


def test_real_number_column():
    values = [1000 * (i + 1) for i in range(12)]
    profile = analyze_column_data(values)
    assert profile.is_numeric is True
    assert profile.is_text is False
    assert profile.has_real_numbers is True
    assert profile.unique_values == 12


def test_text_column_counts_unique_case_insensitively():
    profile = analyze_column_data(["Framing", "framing", " FRAMING ", "Roofing", None, ""])
    assert profile.valid_count == 4
    assert profile.text_count == 4
    assert profile.unique_values == 2
    assert profile.is_text is True
    assert profile.is_numeric is False


def test_currency_strings_are_numeric_and_currency():
    profile = analyze_column_data(["$1,000", "$2,500.50", "(300)", "Note"])
    assert profile.currency_count == 3
    assert profile.has_currency is True
    assert profile.is_numeric is True
    # 1 text value out of 4 valid is below 40%
    assert profile.is_text is False


def test_only_first_sample_rows_are_inspected():
    values = ["Label"] * 5 + [100] * 50
    profile = analyze_column_data(values, config=HeuristicsConfig(sample_rows=5))
    assert profile.valid_count == 5
    assert profile.numeric_count == 0
    assert profile.has_real_numbers is False


def test_empty_column_thresholds_floor_at_one():
    profile = analyze_column_data([None, None, "  "])
    assert profile.valid_count == 0
    assert profile.is_numeric is False
    assert profile.is_text is False
    assert profile.has_real_numbers is False


def test_min_real_numbers_is_configurable():
    profile = analyze_column_data([10, 20, 30], config=HeuristicsConfig(min_real_numbers=3))
    assert profile.has_real_numbers is True
