"""Inbound message classification.

This module is host-agnostic: the message filter host hands over a sender
string and gets back ``ALLOW`` or ``JUNK``. Every failure path allows the
message, so the engine can under-block but never block a sender it could
not positively match.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Optional

from core.cache import BlockedAreaCodeCache
from core.errors import InvalidNumber, SideEffectWriteFailed, StoreUnavailable
from core.models import NumberSource
from core.phone import area_code_of, normalize
from core.repository import PolicyRepository

LOGGER = logging.getLogger(__name__)


class FilterAction(str, Enum):
    ALLOW = "allow"
    JUNK = "junk"


@dataclass(frozen=True)
class RecordNumber:
    """Side effect requested by a junk verdict."""

    national_number: str
    area_code: str
    source: NumberSource = NumberSource.TEXT


@dataclass(frozen=True)
class Verdict:
    action: FilterAction
    record: Optional[RecordNumber] = None


@dataclass(frozen=True)
class ClassificationResult:
    """What the host receives, plus bookkeeping for logs and tests."""

    action: FilterAction
    national_number: Optional[str] = None
    area_code: Optional[str] = None
    recorded: bool = False


ALLOW = Verdict(FilterAction.ALLOW)


def decide(sender_raw: Optional[str], blocked_codes: AbstractSet[str]) -> Verdict:
    """Pure classification against a set of text-blocked area codes."""

    if not sender_raw or not sender_raw.strip():
        return ALLOW
    national = normalize(sender_raw)
    if national is None:
        return ALLOW
    area_code = area_code_of(national)
    if area_code not in blocked_codes:
        return ALLOW
    return Verdict(FilterAction.JUNK, RecordNumber(national_number=national, area_code=area_code))


class MessageClassifier:
    """Classifies senders and records the numbers it junks."""

    def __init__(self, cache: BlockedAreaCodeCache, repository: PolicyRepository) -> None:
        self._cache = cache
        self._repository = repository

    def classify(self, sender_raw: Optional[str], message_body: Optional[str] = None) -> ClassificationResult:
        """Classify one inbound message. ``message_body`` is accepted and ignored."""

        try:
            blocked_codes = self._cache.get()
        except StoreUnavailable as exc:
            LOGGER.warning("Policy store unavailable, allowing message: %s", exc)
            return ClassificationResult(FilterAction.ALLOW)

        verdict = decide(sender_raw, blocked_codes)
        if verdict.record is None:
            return ClassificationResult(verdict.action)

        record = verdict.record
        recorded = False
        try:
            recorded = self._apply(record)
        except SideEffectWriteFailed as exc:
            # The junk verdict stands; only the user-visible list misses this number.
            LOGGER.warning("Could not record junked sender in area code %s: %s", record.area_code, exc)

        return ClassificationResult(
            action=verdict.action,
            national_number=record.national_number,
            area_code=record.area_code,
            recorded=recorded,
        )

    def _apply(self, record: RecordNumber) -> bool:
        try:
            return self._repository.record_number(record.national_number, record.area_code, record.source)
        except (StoreUnavailable, InvalidNumber) as exc:
            raise SideEffectWriteFailed(str(exc)) from exc
