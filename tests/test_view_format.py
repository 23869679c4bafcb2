"""Unit tests for display formatting helpers."""

import math

import pytest

from view_format import (
    NA,
    format_duration_hours,
    format_grouped_number,
    format_risk_score,
    format_scalar,
    mask_account_like,
    pretty_json,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (1234567, "1,234,567"),
        (-1500, "-1,500"),
        (0, "0"),
        (1234.5, "1,234.5"),
        (1000.0, "1,000"),
        (0.12345, "0.123"),
    ],
)
def test_format_grouped_number_groups_thousands(value, expected):
    assert format_grouped_number(value) == expected


def test_format_grouped_number_passes_non_numbers_through():
    assert format_grouped_number("1500000") == "1500000"
    assert format_grouped_number("N/A") == "N/A"
    assert format_grouped_number(float("inf")) == "inf"
    assert format_grouped_number(None) == ""


def test_format_grouped_number_does_not_treat_bool_as_number():
    assert format_grouped_number(True) == "True"


@pytest.mark.parametrize(
    "hours, expected",
    [
        (2.75, "2시간 45분"),
        (0.5, "0시간 30분"),
        (49.5, "49시간 30분"),
        (3, "3시간 0분"),
        ("1.25", "1시간 15분"),
    ],
)
def test_format_duration_hours_floors_both_parts(hours, expected):
    assert format_duration_hours(hours) == expected


def test_format_duration_hours_never_rounds_up_minutes():
    # 59.99 minutes must stay 59, not become the next hour
    assert format_duration_hours(1 + 59.99 / 60) == "1시간 59분"


@pytest.mark.parametrize("hours", [0, 0.0, None, "", False, "abc", float("nan")])
def test_format_duration_hours_missing_values(hours):
    assert format_duration_hours(hours) == NA


def test_format_duration_hours_matches_floor_decomposition():
    for h in [0.1, 0.25, 1.5, 7.75, 12.5, 100.25]:
        expected = f"{math.floor(h)}시간 {math.floor((h % 1) * 60)}분"
        assert format_duration_hours(h) == expected


def test_mask_account_like():
    assert mask_account_like("nan") == ""
    assert mask_account_like("국민은행") == "국민은행"
    assert mask_account_like("NaN") == "NaN"
    assert mask_account_like(None) is None
    assert mask_account_like(1234) == 1234


def test_format_risk_score_fixed_precision():
    assert format_risk_score(0.87654, 3) == "0.877"
    assert format_risk_score("0.5", 2) == "0.50"
    assert format_risk_score(1, 0) == "1"


def test_format_risk_score_raw():
    assert format_risk_score(0.87654, "raw") == "0.87654"
    assert format_risk_score(1.0, "raw") == "1"
    assert format_risk_score("high", "raw") == "high"


def test_format_risk_score_missing_or_invalid():
    assert format_risk_score(None, 3) == NA
    assert format_risk_score(None, "raw") == NA
    assert format_risk_score("high", 3) == "high"


def test_format_scalar():
    assert format_scalar(True) == "true"
    assert format_scalar(False) == "false"
    assert format_scalar(None) == ""
    assert format_scalar(None, missing=NA) == NA
    assert format_scalar(3.0) == "3"
    assert format_scalar(0.25) == "0.25"
    assert format_scalar({"a": 1}) == '{"a": 1}'
    assert format_scalar(["정우성"]) == '["정우성"]'


def test_pretty_json_keeps_korean_text():
    text = pretty_json({"고객명": "정우성", "n": [1, 2]})
    assert "정우성" in text
    assert text.startswith("{\n  ")
