"""File-backed call-blocking host.

Stands in for the OS call directory when exporting from the CLI: entries
are written one per line and the host contract is enforced the same way,
so an ordering bug surfaces as ``ProviderRejected`` rather than a bad file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import IO, Optional

from core.errors import ProviderRejected

LOGGER = logging.getLogger(__name__)


class EntryFileContext:
    """CallDirectoryContextPort that writes accepted entries to ``path``.

    Entries go to a sibling ``.partial`` file that replaces ``path`` only when
    the request completes; a cancelled request leaves no partial output.
    """

    def __init__(self, path: Path, is_incremental: bool = False, max_entries: Optional[int] = None) -> None:
        self._path = Path(path)
        self._partial = self._path.with_name(self._path.name + ".partial")
        self._is_incremental = is_incremental
        self._max_entries = max_entries
        self._handle: Optional[IO[str]] = None
        self._last: Optional[int] = None
        self.entries_written = 0
        self.completed = False
        self.error: Optional[Exception] = None

    @property
    def is_incremental(self) -> bool:
        return self._is_incremental

    def add_blocking_entry(self, number: int) -> None:
        if self._last is not None and number <= self._last:
            raise ProviderRejected(f"entry {number} is not greater than previous entry {self._last}")
        if self._max_entries is not None and self.entries_written >= self._max_entries:
            raise ProviderRejected(f"more than {self._max_entries} entries")
        if self._handle is None:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._handle = self._partial.open("w", encoding="utf-8")
        self._handle.write(f"{number}\n")
        self._last = number
        self.entries_written += 1

    def remove_all_blocking_entries(self) -> None:
        self._discard_partial()
        if self._path.exists():
            self._path.unlink()
        self._last = None
        self.entries_written = 0

    def complete_request(self) -> None:
        if self._handle is None:
            # No entries: publish an empty list.
            self._partial.write_text("", encoding="utf-8")
        else:
            self._handle.close()
            self._handle = None
        os.replace(self._partial, self._path)
        self.completed = True
        LOGGER.info("Wrote %s entries to %s", self.entries_written, self._path)

    def cancel_request(self, error: Exception) -> None:
        self.error = error
        self._discard_partial()
        LOGGER.error("Export to %s cancelled: %s", self._path, error)

    def _discard_partial(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
        if self._partial.exists():
            self._partial.unlink()
