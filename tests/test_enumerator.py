from __future__ import annotations

from datetime import datetime, timezone
from itertools import islice, zip_longest

import pytest

from core.enumerator import (
    RANGE_SIZE,
    check_budget,
    iter_batches,
    iter_entries,
    iter_plan,
    plan_call_blocking,
)
from core.errors import EntryBudgetExceeded
from core.models import AreaCodeRule, BlockedNumber, NumberSource, PolicySnapshot

T0 = datetime(2025, 9, 18, tzinfo=timezone.utc)
BASE_206 = 1 * 10**10 + 206 * 10**7


def _rule(code: str, calls: bool = True, texts: bool = False, rule_id: str | None = None) -> AreaCodeRule:
    return AreaCodeRule(id=rule_id or code, code=code, block_calls=calls, block_texts=texts, created_at=T0)


def _number(national: str, source: NumberSource = NumberSource.MANUAL) -> BlockedNumber:
    return BlockedNumber(
        id=national,
        national_number=national,
        area_code=national[:3],
        source=source,
        blocked_at=T0,
    )


def _snapshot(rules=(), numbers=()) -> PolicySnapshot:
    return PolicySnapshot(area_code_rules=tuple(rules), blocked_numbers=tuple(numbers))


def test_single_area_code_is_complete_range() -> None:
    snapshot = _snapshot([_rule("206")])
    expected = range(BASE_206, BASE_206 + 10_000_000)

    assert all(got == want for got, want in zip_longest(iter_entries(snapshot), expected))
    assert expected[-1] == BASE_206 + 9_999_999


def test_empty_policy_yields_nothing() -> None:
    assert list(iter_entries(_snapshot())) == []
    assert list(iter_batches(plan_call_blocking(_snapshot()))) == []


def test_rules_without_call_blocking_are_ignored() -> None:
    plan = plan_call_blocking(_snapshot([_rule("206", calls=False, texts=True)]))
    assert plan.area_codes == ()
    assert plan.entry_count == 0


def test_area_codes_sorted_numerically() -> None:
    plan = plan_call_blocking(_snapshot([_rule("917"), _rule("206"), _rule("415")]))
    assert plan.area_codes == ("206", "415", "917")


def test_duplicate_rule_generates_range_once() -> None:
    rules = [_rule("415", calls=True, rule_id="a"), _rule("415", calls=False, rule_id="b")]
    plan = plan_call_blocking(_snapshot(rules))
    assert plan.area_codes == ("415",)
    assert plan.entry_count == RANGE_SIZE


def test_duplicate_call_blocking_rules_keep_first() -> None:
    rules = [_rule("415", rule_id="a"), _rule("206"), _rule("415", rule_id="b")]
    plan = plan_call_blocking(_snapshot(rules))
    assert plan.area_codes == ("206", "415")


def test_malformed_codes_are_skipped() -> None:
    plan = plan_call_blocking(_snapshot([_rule("20"), _rule("abc"), _rule("206")]))
    assert plan.area_codes == ("206",)


def test_individual_numbers_inside_blocked_range_are_not_repeated() -> None:
    plan = plan_call_blocking(_snapshot([_rule("206")], [_number("2065551234")]))
    assert plan.extra_numbers == ()
    assert plan.entry_count == RANGE_SIZE


def test_individual_numbers_outside_ranges_are_sorted_and_deduplicated() -> None:
    numbers = [
        _number("9175550000"),
        _number("2125550000", NumberSource.CALL),
        _number("9175550000"),
        _number("3105550000", NumberSource.TEXT),
    ]
    plan = plan_call_blocking(_snapshot(numbers=numbers))
    assert plan.extra_numbers == (12125550000, 19175550000)
    assert list(iter_plan(plan)) == [12125550000, 19175550000]


def test_merge_keeps_strict_ascending_order() -> None:
    rules = [_rule("415"), _rule("206")]
    numbers = [
        _number("9995550000"),
        _number("2005550000"),
        _number("3105550000"),
        _number("2065551111"),
    ]
    plan = plan_call_blocking(_snapshot(rules, numbers))
    assert plan.extra_numbers == (12005550000, 13105550000, 19995550000)

    previous = None
    total = 0
    for value in iter_plan(plan):
        if previous is not None:
            assert value > previous
        previous = value
        total += 1
    assert total == plan.entry_count == 2 * RANGE_SIZE + 3
    assert previous == 19995550000


def test_output_is_deterministic() -> None:
    snapshot = _snapshot(
        [_rule("206"), _rule("212", calls=False)],
        [_number("3105550000"), _number("1005550000")],
    )
    assert plan_call_blocking(snapshot) == plan_call_blocking(snapshot)
    head_a = list(islice(iter_entries(snapshot), 1000))
    head_b = list(islice(iter_entries(snapshot), 1000))
    assert head_a == head_b
    assert head_a[0] == 11005550000


def test_batches_are_bounded_and_contiguous() -> None:
    numbers = [_number(f"310555{i:04d}") for i in range(25)]
    plan = plan_call_blocking(_snapshot(numbers=numbers))
    batches = list(iter_batches(plan, batch_size=10))
    assert [len(batch) for batch in batches] == [10, 10, 5]
    assert [value for batch in batches for value in batch] == list(iter_plan(plan))


def test_batches_reject_non_positive_size() -> None:
    with pytest.raises(ValueError):
        next(iter_batches(plan_call_blocking(_snapshot()), batch_size=0))


def test_budget_check() -> None:
    plan = plan_call_blocking(_snapshot([_rule("206")], [_number("3105550000")]))
    check_budget(plan, None)
    check_budget(plan, RANGE_SIZE + 1)
    with pytest.raises(EntryBudgetExceeded) as excinfo:
        check_budget(plan, RANGE_SIZE)
    assert excinfo.value.planned == RANGE_SIZE + 1


def test_non_ascii_digit_codes_are_skipped() -> None:
    rules = [_rule("206", rule_id="a"), _rule("２０６", rule_id="b"), _rule("²⁰⁶", rule_id="c")]
    plan = plan_call_blocking(_snapshot(rules))
    assert plan.area_codes == ("206",)
    assert plan.entry_count == RANGE_SIZE
