"""Error types shared by the core engine and its adapters."""

from __future__ import annotations


class InvalidNumber(ValueError):
    """Raised when a value is not a 10-digit national number."""


class StoreUnavailable(RuntimeError):
    """The policy store could not be read or written."""


class ProviderRejected(RuntimeError):
    """The call-blocking host refused an entry (order, duplicate or size)."""


class EntryBudgetExceeded(ProviderRejected):
    """The planned entry count is larger than the host allows."""

    def __init__(self, planned: int, max_entries: int) -> None:
        super().__init__(f"planned {planned} entries exceeds maximum of {max_entries}")
        self.planned = planned
        self.max_entries = max_entries


class SideEffectWriteFailed(RuntimeError):
    """Recording a classified number failed after the verdict was made."""


class PolicyEditError(ValueError):
    """An edit was rejected by policy validation."""
