"""Core configuration dataclasses.

Config parsing stays in ``settings``; these dataclasses define the shape the
core expects so adapters and the app layer can build it safely.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.phone import DEFAULT_COUNTRY_CODE

DEFAULT_BATCH_SIZE = 100_000
DEFAULT_CACHE_TTL_SECONDS = 60.0


@dataclass(frozen=True)
class EnumeratorConfig:
    """Call-blocking enumeration settings."""

    batch_size: int = DEFAULT_BATCH_SIZE
    max_entries: Optional[int] = None
    country_code: int = DEFAULT_COUNTRY_CODE


@dataclass(frozen=True)
class CacheConfig:
    """Message-filter cache settings."""

    ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS
