from __future__ import annotations

import random

import pytest

from core.errors import InvalidNumber
from core.phone import area_code_of, e164_of, format_national, is_area_code, normalize


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2065551234", "2065551234"),
        ("12065551234", "2065551234"),
        ("+1 (206) 555-1234", "2065551234"),
        ("1-206-555-1234", "2065551234"),
        ("206.555.1234", "2065551234"),
        ("⁦+1 206-555-1234⁩", "2065551234"),
    ],
)
def test_normalize_accepts_north_american_formats(raw: str, expected: str) -> None:
    assert normalize(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["", "123", "555-1234", "22065551234", "120655512345", "+44 20 7946 0958", "abc"],
)
def test_normalize_rejects_other_lengths(raw: str) -> None:
    assert normalize(raw) is None


def test_normalize_none_is_not_recognized() -> None:
    assert normalize(None) is None


def test_normalize_holds_for_random_digit_strings() -> None:
    rng = random.Random(1234)
    for _ in range(500):
        digits = "".join(rng.choice("0123456789") for _ in range(10))
        assert normalize(digits) == digits
        assert normalize("1" + digits) == digits
        length = rng.choice([0, 1, 5, 9, 12, 15])
        other = "".join(rng.choice("0123456789") for _ in range(length))
        assert normalize(other) is None


def test_area_code_and_e164() -> None:
    assert area_code_of("2065551234") == "206"
    assert e164_of("2065551234") == 12065551234
    assert e164_of("0000000000") == 10_000_000_000


def test_e164_requires_ten_digits() -> None:
    with pytest.raises(InvalidNumber):
        e164_of("206555123")
    with pytest.raises(InvalidNumber):
        e164_of("12065551234")


def test_format_national() -> None:
    assert format_national("2065551234") == "(206) 555-1234"
    assert format_national("555") == "555"


def test_area_code_check_accepts_ascii_digits_only() -> None:
    assert is_area_code("206")
    assert not is_area_code("20")
    assert not is_area_code("２０６")
    assert not is_area_code("²⁰⁶")
