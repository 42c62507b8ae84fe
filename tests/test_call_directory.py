from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import pytest

from adapters.entry_file import EntryFileContext
from core import codec
from core.call_directory import CallDirectoryHandler
from core.config import EnumeratorConfig
from core.enumerator import RANGE_SIZE
from core.errors import EntryBudgetExceeded, ProviderRejected, StoreUnavailable
from core.models import AreaCodeRule, BlockedNumber, NumberSource
from core.repository import PolicyRepository

T0 = datetime(2025, 9, 18, tzinfo=timezone.utc)


class FakeStore:
    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.fail = False

    def load(self, key: str) -> Optional[bytes]:
        if self.fail:
            raise StoreUnavailable("store offline")
        return self.data.get(key)

    def save(self, key: str, data: bytes) -> None:
        self.data[key] = data


class FakeContext:
    """Records host calls; keeps entries only when ``keep`` is set."""

    def __init__(self, *, incremental: bool = False, keep: bool = True, reject_after: Optional[int] = None) -> None:
        self._incremental = incremental
        self._keep = keep
        self._reject_after = reject_after
        self.calls: list[str] = []
        self.entries: list[int] = []
        self.count = 0
        self.last: Optional[int] = None
        self.ordered = True
        self.error: Optional[Exception] = None

    @property
    def is_incremental(self) -> bool:
        return self._incremental

    def add_blocking_entry(self, number: int) -> None:
        if self._reject_after is not None and self.count >= self._reject_after:
            raise ProviderRejected("host limit reached")
        if self.last is not None and number <= self.last:
            self.ordered = False
        self.last = number
        self.count += 1
        if self._keep:
            self.entries.append(number)

    def remove_all_blocking_entries(self) -> None:
        self.calls.append("remove_all")

    def complete_request(self) -> None:
        self.calls.append("complete")

    def cancel_request(self, error: Exception) -> None:
        self.calls.append("cancel")
        self.error = error


def _rule(code: str, calls: bool = True) -> AreaCodeRule:
    return AreaCodeRule(id=code, code=code, block_calls=calls, block_texts=False, created_at=T0)


def _number(national: str, source: NumberSource = NumberSource.MANUAL) -> BlockedNumber:
    return BlockedNumber(id=national, national_number=national, area_code=national[:3], source=source, blocked_at=T0)


def _handler(rules=(), numbers=(), **config) -> tuple[CallDirectoryHandler, FakeStore]:
    store = FakeStore()
    store.data[codec.AREA_CODES_KEY] = codec.encode_rules(rules)
    store.data[codec.NUMBERS_KEY] = codec.encode_numbers(numbers)
    return CallDirectoryHandler(PolicyRepository(store), EnumeratorConfig(**config)), store


def test_full_request_adds_entries_and_completes() -> None:
    handler, _ = _handler(numbers=[_number("3105550000"), _number("2125550000")])
    context = FakeContext()

    summary = handler.begin_request(context)

    assert summary.completed
    assert context.entries == [12125550000, 13105550000]
    assert context.calls == ["complete"]
    assert summary.entries_added == 2


def test_incremental_request_resets_then_reloads_everything() -> None:
    handler, _ = _handler(numbers=[_number("3105550000")])
    context = FakeContext(incremental=True)

    handler.begin_request(context)

    assert context.calls == ["remove_all", "complete"]
    assert context.entries == [13105550000]


def test_area_code_request_streams_full_range_in_order() -> None:
    handler, _ = _handler([_rule("206")], [_number("2005550000")], batch_size=250_000)
    context = FakeContext(keep=False)

    summary = handler.begin_request(context)

    assert summary.completed
    assert context.count == RANGE_SIZE + 1
    assert context.ordered
    assert context.last == 12069999999


def test_store_unavailable_completes_without_entries() -> None:
    handler, store = _handler([_rule("206")])
    store.fail = True
    context = FakeContext()

    summary = handler.begin_request(context)

    assert summary.completed
    assert context.entries == []
    assert context.calls == ["complete"]


def test_budget_overflow_cancels_before_any_entry() -> None:
    handler, _ = _handler([_rule("206")], max_entries=RANGE_SIZE - 1)
    context = FakeContext(keep=False)

    summary = handler.begin_request(context)

    assert not summary.completed
    assert context.count == 0
    assert context.calls == ["cancel"]
    assert isinstance(context.error, EntryBudgetExceeded)


def test_host_rejection_is_fatal_for_the_request() -> None:
    numbers = [_number(f"310555{i:04d}") for i in range(10)]
    handler, _ = _handler(numbers=numbers, batch_size=4)
    context = FakeContext(reject_after=5)

    summary = handler.begin_request(context)

    assert not summary.completed
    assert context.calls == ["cancel"]
    assert len(context.entries) == 5
    assert isinstance(context.error, ProviderRejected)


def test_entry_file_context_writes_completed_request(tmp_path: Path) -> None:
    handler, _ = _handler(numbers=[_number("3105550000"), _number("2125550000")])
    output = tmp_path / "out" / "entries.txt"
    context = EntryFileContext(output)

    handler.begin_request(context)

    assert context.completed
    assert output.read_text(encoding="utf-8").splitlines() == ["12125550000", "13105550000"]
    assert not (tmp_path / "out" / "entries.txt.partial").exists()


def test_entry_file_context_enforces_host_contract(tmp_path: Path) -> None:
    context = EntryFileContext(tmp_path / "entries.txt", max_entries=2)
    context.add_blocking_entry(10)
    with pytest.raises(ProviderRejected):
        context.add_blocking_entry(10)
    with pytest.raises(ProviderRejected):
        context.add_blocking_entry(9)
    context.add_blocking_entry(11)
    with pytest.raises(ProviderRejected):
        context.add_blocking_entry(12)


def test_entry_file_cancel_keeps_previous_output(tmp_path: Path) -> None:
    output = tmp_path / "entries.txt"
    output.write_text("12125550000\n", encoding="utf-8")
    context = EntryFileContext(output)
    context.add_blocking_entry(1)
    context.cancel_request(ProviderRejected("boom"))

    assert output.read_text(encoding="utf-8") == "12125550000\n"
    assert not (tmp_path / "entries.txt.partial").exists()


def test_entry_file_empty_request_publishes_empty_list(tmp_path: Path) -> None:
    handler, _ = _handler()
    output = tmp_path / "entries.txt"
    output.write_text("stale\n", encoding="utf-8")
    context = EntryFileContext(output, is_incremental=True)

    handler.begin_request(context)

    assert output.read_text(encoding="utf-8") == ""


class ResetRefusedContext(FakeContext):
    def remove_all_blocking_entries(self) -> None:
        self.calls.append("remove_all")
        raise ProviderRejected("reset refused")


class BrokenContext(FakeContext):
    def add_blocking_entry(self, number: int) -> None:
        raise OSError("disk full")


def test_rejected_reset_cancels_the_request() -> None:
    handler, _ = _handler(numbers=[_number("3105550000")])
    context = ResetRefusedContext(incremental=True)

    summary = handler.begin_request(context)

    assert not summary.completed
    assert summary.entries_added == 0
    assert summary.error == "reset refused"
    assert context.calls == ["remove_all", "cancel"]
    assert context.entries == []


def test_unexpected_host_error_cancels_and_propagates() -> None:
    handler, _ = _handler(numbers=[_number("3105550000")])
    context = BrokenContext()

    with pytest.raises(OSError):
        handler.begin_request(context)

    assert context.calls == ["cancel"]
    assert isinstance(context.error, OSError)
