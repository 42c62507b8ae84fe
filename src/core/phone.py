"""North-American phone number normalization (core domain)."""

from __future__ import annotations

import re
from typing import Optional

from core.errors import InvalidNumber

DEFAULT_COUNTRY_CODE = 1
NATIONAL_LENGTH = 10
AREA_CODE_LENGTH = 3

_NON_DIGITS = re.compile(r"[^0-9]")


def digits_only(raw: str) -> str:
    return _NON_DIGITS.sub("", raw)


def normalize(raw: Optional[str]) -> Optional[str]:
    """Return the 10-digit national number for ``raw`` or None.

    Every non-digit is stripped first. Eleven digits starting with the
    country code ``1`` lose that prefix; exactly ten digits are kept as-is;
    any other length is not recognized.
    """

    if not raw:
        return None
    digits = digits_only(raw)
    if len(digits) == NATIONAL_LENGTH + 1 and digits.startswith("1"):
        return digits[1:]
    if len(digits) == NATIONAL_LENGTH:
        return digits
    return None


def is_national_number(value: str) -> bool:
    return len(value) == NATIONAL_LENGTH and value.isascii() and value.isdigit()


def is_area_code(value: str) -> bool:
    """True for exactly three ASCII digits."""

    return len(value) == AREA_CODE_LENGTH and value.isascii() and value.isdigit()


def area_code_of(national: str) -> str:
    return national[:AREA_CODE_LENGTH]


def e164_of(national: str, country_code: int = DEFAULT_COUNTRY_CODE) -> int:
    """Return ``country_code`` followed by the national number, as an integer."""

    if not is_national_number(national):
        raise InvalidNumber(f"not a 10-digit national number: {national!r}")
    return country_code * 10**NATIONAL_LENGTH + int(national)


def format_national(national: str) -> str:
    """Format as ``(206) 555-1234``; anything else is returned unchanged."""

    if not is_national_number(national):
        return national
    return f"({national[:3]}) {national[3:6]}-{national[6:]}"
