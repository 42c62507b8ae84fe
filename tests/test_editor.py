from __future__ import annotations

from typing import Optional

import pytest

from core import codec
from core.editor import PolicyEditor
from core.errors import PolicyEditError
from core.models import NumberSource
from core.repository import PolicyRepository


class FakeStore:
    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}

    def load(self, key: str) -> Optional[bytes]:
        return self.data.get(key)

    def save(self, key: str, data: bytes) -> None:
        self.data[key] = data


def _editor() -> tuple[PolicyEditor, PolicyRepository]:
    repository = PolicyRepository(FakeStore())
    return PolicyEditor(repository), repository


def test_add_rule_persists_sorted_rules() -> None:
    editor, repository = _editor()
    editor.add_rule("415", block_calls=True, block_texts=False)
    editor.add_rule(" 206 ", block_calls=False, block_texts=True)

    rules = repository.load_rules()
    assert [rule.code for rule in rules] == ["206", "415"]
    assert rules[0].block_texts and not rules[0].block_calls


@pytest.mark.parametrize("code", ["", "20", "2065", "abc", "2O6", "２０６", "²⁰⁶"])
def test_add_rule_rejects_malformed_codes(code: str) -> None:
    editor, _ = _editor()
    with pytest.raises(PolicyEditError):
        editor.add_rule(code)


def test_add_rule_requires_calls_or_texts() -> None:
    editor, _ = _editor()
    with pytest.raises(PolicyEditError):
        editor.add_rule("206", block_calls=False, block_texts=False)


def test_add_rule_rejects_duplicates() -> None:
    editor, repository = _editor()
    editor.add_rule("206")
    with pytest.raises(PolicyEditError):
        editor.add_rule("206", block_calls=False, block_texts=True)
    assert len(repository.load_rules()) == 1


def test_toggle_and_remove_rule() -> None:
    editor, repository = _editor()
    editor.add_rule("206", block_calls=True, block_texts=True)
    rule_id = editor.find_rule_id("206")
    assert rule_id is not None

    editor.toggle_rule(rule_id, calls=True)
    rule = repository.load_rules()[0]
    assert not rule.block_calls and rule.block_texts

    editor.remove_rule(rule_id)
    assert repository.load_rules() == ()
    assert editor.find_rule_id("206") is None


def test_manual_numbers_add_remove_and_clear() -> None:
    editor, repository = _editor()
    model, inserted = editor.add_number("(212) 555-0000")
    assert inserted
    _, inserted_again = editor.add_number("1-212-555-0000")
    assert not inserted_again
    editor.add_number("3105550000", NumberSource.CALL)

    numbers = repository.load_numbers()
    assert [n.source for n in numbers] == [NumberSource.MANUAL, NumberSource.CALL]

    editor.remove_number(model.numbers[0].id)
    assert [n.national_number for n in repository.load_numbers()] == ["3105550000"]

    editor.add_rule("206")
    editor.clear_numbers()
    assert repository.load_numbers() == ()
    assert len(repository.load_rules()) == 1


def test_add_number_rejects_unparseable_input() -> None:
    editor, repository = _editor()
    with pytest.raises(PolicyEditError):
        editor.add_number("555-0000")
    assert codec.NUMBERS_KEY not in repository._store.data


def test_full_width_code_is_not_a_second_rule() -> None:
    editor, repository = _editor()
    editor.add_rule("206")
    with pytest.raises(PolicyEditError):
        editor.add_rule("２０６")
    assert [rule.code for rule in repository.load_rules()] == ["206"]
