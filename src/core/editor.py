"""Editing operations used by the UI and CLI.

Each operation loads the current policy, applies one change and persists the
affected key. Validation mirrors what a user can type: area codes are three
digits, at least one of calls/texts is blocked, and a code is listed once.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.errors import InvalidNumber, PolicyEditError
from core.models import NumberSource
from core.phone import area_code_of, is_area_code, normalize
from core.policy import PolicyModel
from core.repository import PolicyRepository

LOGGER = logging.getLogger(__name__)


def validate_area_code(raw: str) -> str:
    code = raw.strip()
    if not is_area_code(code):
        raise PolicyEditError("Please enter a valid 3-digit area code.")
    return code


class PolicyEditor:
    """Add, remove and toggle policy entries and persist the result."""

    def __init__(self, repository: PolicyRepository) -> None:
        self._repository = repository

    def load(self) -> PolicyModel:
        return self._repository.load_model()

    def add_rule(self, raw_code: str, block_calls: bool = True, block_texts: bool = True) -> PolicyModel:
        code = validate_area_code(raw_code)
        if not block_calls and not block_texts:
            raise PolicyEditError("You must select to block either calls or texts (or both).")
        model = self.load()
        if model.has_rule_for(code):
            raise PolicyEditError("This area code is already in the list.")
        updated = model.add_rule(code, block_calls, block_texts)
        self._repository.save_rules(updated.rules)
        LOGGER.info("Added area code %s (calls=%s, texts=%s)", code, block_calls, block_texts)
        return updated

    def remove_rule(self, rule_id: str) -> PolicyModel:
        model = self.load()
        updated = model.remove_rule(rule_id)
        if updated is not model:
            self._repository.save_rules(updated.rules)
            LOGGER.info("Removed area code rule %s", rule_id)
        return updated

    def toggle_rule(self, rule_id: str, *, calls: bool = False, texts: bool = False) -> PolicyModel:
        model = self.load()
        updated = model.toggle_rule(rule_id, calls=calls, texts=texts)
        self._repository.save_rules(updated.rules)
        return updated

    def add_number(self, raw_number: str, source: NumberSource = NumberSource.MANUAL) -> tuple[PolicyModel, bool]:
        national = normalize(raw_number)
        if national is None:
            raise PolicyEditError("Please enter a 10-digit phone number.")
        model = self.load()
        try:
            updated, inserted = model.add_number(national, area_code_of(national), source)
        except InvalidNumber as exc:
            raise PolicyEditError(str(exc)) from exc
        if inserted:
            self._repository.save_numbers(updated.numbers)
        return updated, inserted

    def remove_number(self, number_id: str) -> PolicyModel:
        model = self.load()
        updated = model.remove_number(number_id)
        if updated is not model:
            self._repository.save_numbers(updated.numbers)
        return updated

    def clear_numbers(self) -> PolicyModel:
        """Remove every individually blocked number; area code rules stay."""

        updated = self.load().clear_numbers()
        self._repository.save_numbers(updated.numbers)
        LOGGER.info("Cleared all blocked numbers")
        return updated

    def find_rule_id(self, code: str) -> Optional[str]:
        for rule in self.load().rules:
            if rule.code == code:
                return rule.id
        return None
