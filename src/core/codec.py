"""JSON encoding for the two policy store keys.

Records use the field names of the core dataclasses. Timestamps are ISO 8601
strings; rule order and number order are preserved as written.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Iterable, List

from core.models import AreaCodeRule, BlockedNumber, NumberSource

AREA_CODES_KEY = "blockedAreaCodes"
NUMBERS_KEY = "blockedNumbers"


class DecodeError(ValueError):
    """Stored bytes are not a valid record list."""


def encode_rules(rules: Iterable[AreaCodeRule]) -> bytes:
    payload = [
        {
            "id": rule.id,
            "code": rule.code,
            "block_calls": rule.block_calls,
            "block_texts": rule.block_texts,
            "created_at": rule.created_at.isoformat(),
        }
        for rule in rules
    ]
    return _dump(payload)


def decode_rules(data: bytes) -> List[AreaCodeRule]:
    rules: List[AreaCodeRule] = []
    for record in _load(data):
        try:
            rules.append(
                AreaCodeRule(
                    id=str(record["id"]),
                    code=str(record["code"]),
                    block_calls=_flag(record, "block_calls"),
                    block_texts=_flag(record, "block_texts"),
                    created_at=datetime.fromisoformat(record["created_at"]),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise DecodeError(f"invalid area code record: {record!r}") from exc
    return rules


def encode_numbers(numbers: Iterable[BlockedNumber]) -> bytes:
    payload = [
        {
            "id": number.id,
            "national_number": number.national_number,
            "area_code": number.area_code,
            "source": number.source.value,
            "blocked_at": number.blocked_at.isoformat(),
        }
        for number in numbers
    ]
    return _dump(payload)


def decode_numbers(data: bytes) -> List[BlockedNumber]:
    numbers: List[BlockedNumber] = []
    for record in _load(data):
        try:
            numbers.append(
                BlockedNumber(
                    id=str(record["id"]),
                    national_number=str(record["national_number"]),
                    area_code=str(record["area_code"]),
                    source=NumberSource(record["source"]),
                    blocked_at=datetime.fromisoformat(record["blocked_at"]),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise DecodeError(f"invalid blocked number record: {record!r}") from exc
    return numbers


def _dump(payload: List[dict[str, Any]]) -> bytes:
    return json.dumps(payload, ensure_ascii=True).encode("utf-8")


def _load(data: bytes) -> List[dict[str, Any]]:
    try:
        payload = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeError(f"stored data is not JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise DecodeError("stored data must be a list of records")
    for record in payload:
        if not isinstance(record, dict):
            raise DecodeError(f"record must be an object: {record!r}")
    return payload


def _flag(record: dict[str, Any], key: str) -> bool:
    value = record[key]
    if not isinstance(value, bool):
        raise DecodeError(f"{key} must be true or false: {value!r}")
    return value
