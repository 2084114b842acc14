"""Tests for date helpers."""

from datetime import date

from gateway_checkin.utils.dates import (
    format_date,
    format_month,
    local_today,
    parse_date,
    parse_month,
)


def test_date_round_trip():
    assert format_date(date(2026, 1, 5)) == "2026-01-05"
    assert parse_date("2026-01-05") == date(2026, 1, 5)


def test_parse_date_invalid():
    assert parse_date("2026-13-01") is None
    assert parse_date("yesterday") is None


def test_month_helpers():
    assert format_month(date(2026, 11, 30)) == "2026-11"
    assert parse_month("2026-11") == date(2026, 11, 1)
    assert parse_month("2026/11") is None
    assert parse_month("") is None


def test_local_today_in_zone():
    assert isinstance(local_today("UTC"), date)
    assert isinstance(local_today(None), date)
