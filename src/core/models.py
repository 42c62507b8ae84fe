"""Core domain models.

These dataclasses are shared across the core and adapters so that store,
host and UI code never pass raw dicts to the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from core.phone import DEFAULT_COUNTRY_CODE, e164_of, is_national_number


class NumberSource(str, Enum):
    """Where an individually blocked number came from."""

    CALL = "call"
    TEXT = "text"
    MANUAL = "manual"


@dataclass(frozen=True)
class AreaCodeRule:
    """A blocked area code with separate switches for calls and texts."""

    id: str
    code: str
    block_calls: bool
    block_texts: bool
    created_at: datetime

    def toggled(self, *, calls: bool = False, texts: bool = False) -> "AreaCodeRule":
        return replace(
            self,
            block_calls=not self.block_calls if calls else self.block_calls,
            block_texts=not self.block_texts if texts else self.block_texts,
        )


@dataclass(frozen=True)
class BlockedNumber:
    """A single number recorded as blocked."""

    id: str
    national_number: str
    area_code: str
    source: NumberSource
    blocked_at: datetime

    @property
    def e164(self) -> Optional[int]:
        """Country-code-prefixed integer, or None if the number is not 10 digits."""

        if not is_national_number(self.national_number):
            return None
        return e164_of(self.national_number, DEFAULT_COUNTRY_CODE)


@dataclass(frozen=True)
class PolicySnapshot:
    """Rules and numbers read together at the start of one engine cycle."""

    area_code_rules: Tuple[AreaCodeRule, ...] = field(default_factory=tuple)
    blocked_numbers: Tuple[BlockedNumber, ...] = field(default_factory=tuple)
