"""Policy model: read accessors and copy-on-write updates over a snapshot.

The model owns no I/O. Every update returns a new model wrapping a new
``PolicySnapshot``; the caller decides when to persist it.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, FrozenSet, List, Optional, Tuple

from core.errors import InvalidNumber
from core.models import AreaCodeRule, BlockedNumber, NumberSource, PolicySnapshot
from core.phone import area_code_of, normalize


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class PolicyModel:
    """In-memory view of one policy snapshot."""

    def __init__(
        self,
        snapshot: Optional[PolicySnapshot] = None,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_id,
    ) -> None:
        self._snapshot = snapshot or PolicySnapshot()
        self._clock = clock
        self._id_factory = id_factory

    @property
    def snapshot(self) -> PolicySnapshot:
        return self._snapshot

    @property
    def rules(self) -> Tuple[AreaCodeRule, ...]:
        return self._snapshot.area_code_rules

    @property
    def numbers(self) -> Tuple[BlockedNumber, ...]:
        return self._snapshot.blocked_numbers

    def call_blocked_area_codes(self) -> FrozenSet[str]:
        return frozenset(rule.code for rule in self.rules if rule.block_calls)

    def text_blocked_area_codes(self) -> FrozenSet[str]:
        return frozenset(rule.code for rule in self.rules if rule.block_texts)

    def is_number_call_eligible(self, number: BlockedNumber) -> bool:
        return number.area_code in self.call_blocked_area_codes()

    def is_number_text_eligible(self, number: BlockedNumber) -> bool:
        return number.area_code in self.text_blocked_area_codes()

    def find_number(self, national_number: str) -> Optional[BlockedNumber]:
        for number in self.numbers:
            if number.national_number == national_number:
                return number
        return None

    def numbers_by_recency(self) -> List[BlockedNumber]:
        """Newest first; insertion order breaks ties."""

        indexed = list(enumerate(self.numbers))
        indexed.sort(key=lambda item: (item[1].blocked_at, item[0]), reverse=True)
        return [number for _, number in indexed]

    def add_number(
        self,
        phone_digits: str,
        area_code: Optional[str],
        source: NumberSource,
    ) -> Tuple["PolicyModel", bool]:
        """Record a number unless its normalized form is already present.

        Returns ``(model, inserted)``. Repeating the same call returns the
        unchanged model with ``inserted=False``.
        """

        national = normalize(phone_digits)
        if national is None:
            raise InvalidNumber(f"not a North-American number: {phone_digits!r}")
        derived = area_code_of(national)
        if area_code is not None and area_code != derived:
            raise InvalidNumber(f"area code {area_code!r} does not match {national}")

        if self.find_number(national) is not None:
            return self, False

        number = BlockedNumber(
            id=self._id_factory(),
            national_number=national,
            area_code=derived,
            source=NumberSource(source),
            blocked_at=self._clock(),
        )
        return self._with(blocked_numbers=self.numbers + (number,)), True

    def remove_number(self, number_id: str) -> "PolicyModel":
        """Remove a number by id; unknown ids are ignored."""

        kept = tuple(number for number in self.numbers if number.id != number_id)
        if len(kept) == len(self.numbers):
            return self
        return self._with(blocked_numbers=kept)

    def clear_numbers(self) -> "PolicyModel":
        return self._with(blocked_numbers=())

    def has_rule_for(self, code: str) -> bool:
        return any(rule.code == code for rule in self.rules)

    def add_rule(self, code: str, block_calls: bool, block_texts: bool) -> "PolicyModel":
        """Append a rule and keep the list sorted by code."""

        rule = AreaCodeRule(
            id=self._id_factory(),
            code=code,
            block_calls=block_calls,
            block_texts=block_texts,
            created_at=self._clock(),
        )
        # sorted() is stable, so pre-existing duplicates keep their relative order
        rules = sorted(self.rules + (rule,), key=lambda item: item.code)
        return self._with(area_code_rules=tuple(rules))

    def remove_rule(self, rule_id: str) -> "PolicyModel":
        kept = tuple(rule for rule in self.rules if rule.id != rule_id)
        if len(kept) == len(self.rules):
            return self
        return self._with(area_code_rules=kept)

    def toggle_rule(self, rule_id: str, *, calls: bool = False, texts: bool = False) -> "PolicyModel":
        updated = tuple(
            rule.toggled(calls=calls, texts=texts) if rule.id == rule_id else rule
            for rule in self.rules
        )
        return self._with(area_code_rules=updated)

    def _with(self, **changes) -> "PolicyModel":
        return PolicyModel(
            replace(self._snapshot, **changes),
            clock=self._clock,
            id_factory=self._id_factory,
        )
