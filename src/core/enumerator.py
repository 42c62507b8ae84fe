"""Call-blocking entry enumeration (core domain).

The call-blocking host accepts numbers only in strictly ascending order and
rejects duplicates, so the policy is first reduced to a ``CallBlockingPlan``
(distinct area codes in ascending order, plus individually blocked numbers
that fall outside those codes) and then streamed from the plan.

Output is a pure function of the snapshot: a host that times out mid-stream
restarts from the first entry and gets exactly the same sequence.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import islice
from typing import Iterable, Iterator, List, Optional, Tuple

from core.config import DEFAULT_BATCH_SIZE
from core.errors import EntryBudgetExceeded
from core.models import AreaCodeRule, NumberSource, PolicySnapshot
from core.phone import AREA_CODE_LENGTH, DEFAULT_COUNTRY_CODE, NATIONAL_LENGTH, e164_of, is_area_code, is_national_number

LOGGER = logging.getLogger(__name__)

# Numbers sharing one area code: the 7-digit subscriber part.
RANGE_SIZE = 10**7

# Only these sources block calls on their own; text detections rely on the rule.
CALL_BLOCKING_SOURCES = frozenset({NumberSource.CALL, NumberSource.MANUAL})


@dataclass(frozen=True)
class CallBlockingPlan:
    """Everything needed to stream entries, already ordered and deduplicated."""

    area_codes: Tuple[str, ...]
    extra_numbers: Tuple[int, ...]
    country_code: int = DEFAULT_COUNTRY_CODE

    @property
    def entry_count(self) -> int:
        return len(self.area_codes) * RANGE_SIZE + len(self.extra_numbers)

    def range_for(self, code: str) -> range:
        base = self.country_code * 10**NATIONAL_LENGTH + int(code) * RANGE_SIZE
        return range(base, base + RANGE_SIZE)


def select_call_blocked_codes(rules: Iterable[AreaCodeRule]) -> Tuple[str, ...]:
    """Return distinct call-blocked codes in ascending numeric order.

    Rules are filtered on ``block_calls`` first; when a code then appears more
    than once only the first occurrence is kept.
    """

    seen: set[str] = set()
    codes: List[str] = []
    for rule in rules:
        if not rule.block_calls:
            continue
        if not is_area_code(rule.code):
            LOGGER.warning("Skipping malformed area code rule %r (id=%s)", rule.code, rule.id)
            continue
        if rule.code in seen:
            LOGGER.warning("Dropping duplicate area code rule %s (id=%s)", rule.code, rule.id)
            continue
        seen.add(rule.code)
        codes.append(rule.code)
    codes.sort(key=int)
    return tuple(codes)


def plan_call_blocking(
    snapshot: PolicySnapshot,
    country_code: int = DEFAULT_COUNTRY_CODE,
) -> CallBlockingPlan:
    """Reduce a snapshot to an ordered, duplicate-free plan."""

    codes = select_call_blocked_codes(snapshot.area_code_rules)
    covered = set(codes)

    extras: set[int] = set()
    for number in snapshot.blocked_numbers:
        if number.source not in CALL_BLOCKING_SOURCES:
            continue
        if not is_national_number(number.national_number):
            continue
        # Numbers inside a fully blocked area code are already in its range.
        if number.national_number[:AREA_CODE_LENGTH] in covered:
            continue
        extras.add(e164_of(number.national_number, country_code))

    return CallBlockingPlan(
        area_codes=codes,
        extra_numbers=tuple(sorted(extras)),
        country_code=country_code,
    )


def check_budget(plan: CallBlockingPlan, max_entries: Optional[int]) -> None:
    """Raise ``EntryBudgetExceeded`` if the plan cannot fit the host's limit."""

    if max_entries is None:
        return
    planned = plan.entry_count
    if planned > max_entries:
        raise EntryBudgetExceeded(planned, max_entries)


def iter_plan(plan: CallBlockingPlan) -> Iterator[int]:
    """Stream a plan as one strictly ascending sequence.

    This is an ascending merge of the area-code ranges with the extra numbers.
    Extras never fall inside a blocked range, so they are only ever emitted
    between ranges, never interleaved within one.
    """

    extras = iter(plan.extra_numbers)
    pending = next(extras, None)
    for code in plan.area_codes:
        block = plan.range_for(code)
        while pending is not None and pending < block.start:
            yield pending
            pending = next(extras, None)
        yield from block
    while pending is not None:
        yield pending
        pending = next(extras, None)


def iter_entries(
    snapshot: PolicySnapshot,
    country_code: int = DEFAULT_COUNTRY_CODE,
) -> Iterator[int]:
    """All call-blocking entries for ``snapshot``, ascending and distinct."""

    return iter_plan(plan_call_blocking(snapshot, country_code))


def iter_batches(
    plan: CallBlockingPlan,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> Iterator[List[int]]:
    """Yield the plan's entries in lists of at most ``batch_size``."""

    if batch_size <= 0:
        raise ValueError("batch_size must be positive")
    stream = iter_plan(plan)
    while True:
        batch = list(islice(stream, batch_size))
        if not batch:
            return
        yield batch
