"""Ports (interfaces) used by the core engine.

Ports define the minimal contracts for the policy store and the call-blocking
host so the engine can be driven by any backend, including test fakes.
"""

from __future__ import annotations

from typing import Optional, Protocol


class PolicyStorePort(Protocol):
    """Key-value blob store holding the serialized policy.

    Implementations raise ``StoreUnavailable`` on any read or write failure.
    A successful ``load`` returns the most recently committed ``save``.
    """

    def load(self, key: str) -> Optional[bytes]:
        ...

    def save(self, key: str, data: bytes) -> None:
        ...


class CallDirectoryContextPort(Protocol):
    """One request from the call-blocking host.

    ``add_blocking_entry`` must be called in strictly ascending order without
    duplicates; the host raises ``ProviderRejected`` otherwise, and the whole
    request is then lost.
    """

    @property
    def is_incremental(self) -> bool:
        ...

    def add_blocking_entry(self, number: int) -> None:
        ...

    def remove_all_blocking_entries(self) -> None:
        ...

    def complete_request(self) -> None:
        ...

    def cancel_request(self, error: Exception) -> None:
        ...
