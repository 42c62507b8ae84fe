"""Call-blocking request handler.

Drives one host request: read the policy once, plan, then feed entries to
the host in batches. Incremental requests are served as a full reload after
clearing the host's previous entries, which keeps the output consistent at
the cost of re-sending every entry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from core.config import EnumeratorConfig
from core.enumerator import CallBlockingPlan, check_budget, iter_batches, plan_call_blocking
from core.errors import EntryBudgetExceeded, ProviderRejected, StoreUnavailable
from core.models import PolicySnapshot
from core.ports import CallDirectoryContextPort
from core.repository import PolicyRepository

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestSummary:
    """Outcome of one host request."""

    completed: bool
    entries_added: int
    area_codes: int
    individual_numbers: int
    error: Optional[str] = None


class CallDirectoryHandler:
    """Serves call-blocking host requests from the stored policy."""

    def __init__(self, repository: PolicyRepository, config: Optional[EnumeratorConfig] = None) -> None:
        self._repository = repository
        self._config = config or EnumeratorConfig()

    def begin_request(self, context: CallDirectoryContextPort) -> RequestSummary:
        snapshot = self._load_snapshot()
        plan = plan_call_blocking(snapshot, self._config.country_code)

        added = 0
        try:
            if context.is_incremental:
                LOGGER.info("Incremental request served as full reload")
                context.remove_all_blocking_entries()
            check_budget(plan, self._config.max_entries)
            for batch in iter_batches(plan, self._config.batch_size):
                for number in batch:
                    context.add_blocking_entry(number)
                    added += 1
            context.complete_request()
        except EntryBudgetExceeded as exc:
            LOGGER.error("Call-blocking request refused: %s", exc)
            context.cancel_request(exc)
            return self._summary(plan, completed=False, added=0, error=str(exc))
        except ProviderRejected as exc:
            # Nothing can be resumed; the next host request starts from zero.
            LOGGER.error("Host rejected request after %s entries: %s", added, exc)
            context.cancel_request(exc)
            return self._summary(plan, completed=False, added=added, error=str(exc))
        except Exception as exc:
            LOGGER.exception("Call-blocking request failed after %s entries", added)
            context.cancel_request(exc)
            raise

        LOGGER.info(
            "Call-blocking request complete: area_codes=%s, numbers=%s, entries=%s",
            len(plan.area_codes),
            len(plan.extra_numbers),
            added,
        )
        return self._summary(plan, completed=True, added=added)

    def _load_snapshot(self) -> PolicySnapshot:
        try:
            return self._repository.load_snapshot()
        except StoreUnavailable as exc:
            LOGGER.warning("Policy store unavailable, blocking nothing: %s", exc)
            return PolicySnapshot()

    @staticmethod
    def _summary(
        plan: CallBlockingPlan,
        *,
        completed: bool,
        added: int,
        error: Optional[str] = None,
    ) -> RequestSummary:
        return RequestSummary(
            completed=completed,
            entries_added=added,
            area_codes=len(plan.area_codes),
            individual_numbers=len(plan.extra_numbers),
            error=error,
        )
