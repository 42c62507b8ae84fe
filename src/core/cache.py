"""Time-bounded cache for the text-blocked area codes.

The message filter runs once per inbound message, so the blocked set is
cached for ``ttl_seconds`` (60s by default). There is no invalidation on
write: a policy change can take up to one TTL to reach the classifier.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, FrozenSet, Optional

from core.config import DEFAULT_CACHE_TTL_SECONDS
from core.models import PolicySnapshot
from core.policy import PolicyModel
from core.repository import PolicyRepository

LOGGER = logging.getLogger(__name__)


class BlockedAreaCodeCache:
    """Caches the result of ``loader`` with TTL expiration.

    A failing ``loader`` propagates its exception and leaves the previous
    entry untouched; failures are never cached.
    """

    def __init__(
        self,
        loader: Callable[[], FrozenSet[str]],
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self._ttl = ttl_seconds
        self._clock = clock
        self._value: Optional[FrozenSet[str]] = None
        self._cached_at = 0.0

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, now: Optional[float] = None) -> FrozenSet[str]:
        """Return the cached set, recomputing it once the entry is ``ttl`` old."""

        if now is None:
            now = self._clock()
        if self._value is not None and now - self._cached_at < self._ttl:
            return self._value

        value = frozenset(self._loader())
        self._value = value
        self._cached_at = now
        LOGGER.debug("Refreshed text-blocked area codes (%s codes)", len(value))
        return value

    def clear(self) -> None:
        self._value = None
        self._cached_at = 0.0


def text_blocked_codes_loader(repository: PolicyRepository) -> Callable[[], FrozenSet[str]]:
    """Loader reading only the rules key from the store."""

    def _load() -> FrozenSet[str]:
        snapshot = PolicySnapshot(area_code_rules=repository.load_rules())
        return PolicyModel(snapshot).text_blocked_area_codes()

    return _load
