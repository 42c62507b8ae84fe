"""Validation helpers for policy editing forms."""

from __future__ import annotations

from dataclasses import dataclass

from core.phone import area_code_of, is_area_code, normalize


@dataclass
class AreaCodeInfo:
    normalized: str | None
    error: str | None = None


@dataclass
class PhoneNumberInfo:
    normalized: str | None
    area_code: str | None
    error: str | None = None


def parse_area_code(raw_value: str) -> AreaCodeInfo:
    raw_value = raw_value.strip()
    if not raw_value:
        return AreaCodeInfo(None, "area code is required")
    if not is_area_code(raw_value):
        return AreaCodeInfo(None, "area code must be exactly 3 digits")
    return AreaCodeInfo(raw_value)


def parse_phone_number(raw_value: str) -> PhoneNumberInfo:
    raw_value = raw_value.strip()
    if not raw_value:
        return PhoneNumberInfo(None, None, "phone number is required")
    national = normalize(raw_value)
    if national is None:
        return PhoneNumberInfo(None, None, "enter 10 digits, or 11 starting with 1")
    return PhoneNumberInfo(national, area_code_of(national))
