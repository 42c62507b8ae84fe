"""Policy repository: snapshots in and out of the blob store."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional, Tuple

from core import codec
from core.errors import StoreUnavailable
from core.models import AreaCodeRule, BlockedNumber, NumberSource, PolicySnapshot
from core.policy import PolicyModel
from core.ports import PolicyStorePort

LOGGER = logging.getLogger(__name__)


class PolicyRepository:
    """Reads and writes both policy keys through a ``PolicyStorePort``.

    Missing keys read as empty lists. Undecodable data is reported as
    ``StoreUnavailable`` so callers apply the same fail-open handling as for
    an unreachable store.
    """

    def __init__(
        self,
        store: PolicyStorePort,
        model_factory: Callable[[PolicySnapshot], PolicyModel] = PolicyModel,
    ) -> None:
        self._store = store
        self._model_factory = model_factory

    def load_snapshot(self) -> PolicySnapshot:
        rules = self.load_rules()
        numbers = self.load_numbers()
        return PolicySnapshot(area_code_rules=rules, blocked_numbers=numbers)

    def load_model(self) -> PolicyModel:
        return self._model_factory(self.load_snapshot())

    def load_rules(self) -> Tuple[AreaCodeRule, ...]:
        data = self._store.load(codec.AREA_CODES_KEY)
        if data is None:
            return ()
        try:
            return tuple(codec.decode_rules(data))
        except codec.DecodeError as exc:
            raise StoreUnavailable(f"{codec.AREA_CODES_KEY} is unreadable: {exc}") from exc

    def load_numbers(self) -> Tuple[BlockedNumber, ...]:
        data = self._store.load(codec.NUMBERS_KEY)
        if data is None:
            return ()
        try:
            return tuple(codec.decode_numbers(data))
        except codec.DecodeError as exc:
            raise StoreUnavailable(f"{codec.NUMBERS_KEY} is unreadable: {exc}") from exc

    def save_rules(self, rules: Iterable[AreaCodeRule]) -> None:
        self._store.save(codec.AREA_CODES_KEY, codec.encode_rules(rules))

    def save_numbers(self, numbers: Iterable[BlockedNumber]) -> None:
        self._store.save(codec.NUMBERS_KEY, codec.encode_numbers(numbers))

    def save_model(self, model: PolicyModel) -> None:
        self.save_rules(model.rules)
        self.save_numbers(model.numbers)

    def record_number(
        self,
        national_number: str,
        area_code: Optional[str],
        source: NumberSource,
    ) -> bool:
        """Add a number against the latest stored list; True if it was new."""

        model = self._model_factory(
            PolicySnapshot(area_code_rules=(), blocked_numbers=self.load_numbers())
        )
        updated, inserted = model.add_number(national_number, area_code, source)
        if inserted:
            self.save_numbers(updated.numbers)
            LOGGER.info("Recorded blocked number in area code %s (%s)", updated.numbers[-1].area_code, source.value)
        return inserted
