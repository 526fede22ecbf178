"""Unit tests for the expiry calculator."""

import pytest

from services.expiry.calculator import (
    SHELF_LIFE_TABLE,
    compute_expiry,
    parse_production_date,
    shelf_life_days,
)


def test_compute_expiry_180_days() -> None:
    """Product 223 keeps for 180 days."""
    assert compute_expiry("223", "01/01/2024") == "29/06/2024"


@pytest.mark.parametrize(
    "code,production,expected",
    [
        ("104", "10/03/2024", "17/03/2024"),
        ("122", "20/12/2023", "04/01/2024"),
        ("290", "01/02/2024", "01/04/2024"),
        ("300", "01/01/2023", "01/01/2024"),
        (201, "01/01/2024", "29/06/2024"),
    ],
)
def test_compute_expiry_buckets(code: str | int, production: str, expected: str) -> None:
    assert compute_expiry(code, production) == expected


@pytest.mark.parametrize(
    "code,production",
    [
        ("999", "01/01/2024"),
        ("", "01/01/2024"),
        (None, "01/01/2024"),
        ("223", ""),
        ("223", None),
        ("223", "2024-01-01"),
        ("223", "01/01"),
        ("223", "aa/01/2024"),
        ("223", "31/02/2024"),
        ("223", "\u00b2/01/2024"),
        ("300", "31/12/9999"),
    ],
)
def test_compute_expiry_invalid(code: str | None, production: str | None) -> None:
    assert compute_expiry(code, production) == ""


def test_shelf_life_days() -> None:
    assert shelf_life_days("223") == 180
    assert shelf_life_days(" 0106 ") == 15
    assert shelf_life_days("308") == 365
    assert shelf_life_days("abc") is None
    assert shelf_life_days("1") is None


def test_first_bucket_wins() -> None:
    """Table order decides when a code would appear in several buckets."""
    first_days, first_codes = SHELF_LIFE_TABLE[0]
    code = next(iter(first_codes))

    assert shelf_life_days(code) == first_days


def test_parse_production_date() -> None:
    assert parse_production_date("05/06/2024") is not None
    assert parse_production_date("5/6/2024") is not None
    assert parse_production_date("05/06/2024/1") is None
    assert parse_production_date("\u00b2/01/2024") is None


def test_expiry_past_last_date() -> None:
    """Shelf life running past year 9999 gives no expiry instead of raising."""
    assert compute_expiry("300", "31/12/9999") == ""
    assert compute_expiry("104", "24/12/9999") == "31/12/9999"
