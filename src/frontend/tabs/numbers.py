"""Blocked numbers tab, newest first."""

from __future__ import annotations

from typing import Any, Optional

from textual import on
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, DataTable, Static

from core.models import BlockedNumber, NumberSource
from core.phone import format_national
from ..modals import AddNumberScreen, ClearNumbersScreen, DeleteNumberScreen


class NumbersTab(Container):
    """Lists individually blocked numbers and lets the user remove them."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._current_row_key: Optional[str] = None
        self._table_ready = False

    def compose(self):
        with Vertical(id="numbers-panel"):
            yield Static("", id="numbers-title")
            yield DataTable(id="numbers-table", cursor_type="row")
            with Horizontal(id="numbers-actions"):
                yield Button("Block number", id="add-number", variant="success")
                yield Button("Unblock", id="delete-number", variant="error")
                yield Button("Clear all", id="clear-numbers", variant="error")
            yield Static(
                "Numbers appear here when texts from blocked area codes are detected.",
                id="numbers-footer",
            )

    def on_mount(self) -> None:
        table = self.query_one("#numbers-table", DataTable)
        table.add_column("number", key="number", width=16)
        table.add_column("area code", key="area_code", width=10)
        table.add_column("source", key="source", width=8)
        table.add_column("blocked", key="blocked_at", width=18)
        table.zebra_stripes = True
        table.styles.height = "1fr"
        self.query_one("#numbers-actions").styles.height = 3
        self._table_ready = True
        self.reload_from_policy()

    def reload_from_policy(self) -> None:
        if not self._table_ready:
            return
        table = self.query_one("#numbers-table", DataTable)
        table.clear()
        numbers = self._get_numbers()
        for number in numbers:
            table.add_row(
                format_national(number.national_number),
                number.area_code,
                self._source_label(number.source),
                number.blocked_at.strftime("%Y-%m-%d %H:%M"),
                key=number.id,
            )
        count = len(numbers)
        self.query_one("#numbers-title", Static).update(f"{count} blocked number{'' if count == 1 else 's'}")
        if self._current_row_key and self._find_number(self._current_row_key) is None:
            self._current_row_key = None
        self._update_action_state()

    def _get_numbers(self) -> list[BlockedNumber]:
        model = self.app.policy_state.model
        if model is None:
            return []
        return model.numbers_by_recency()

    def _find_number(self, number_id: str) -> Optional[BlockedNumber]:
        for number in self._get_numbers():
            if number.id == number_id:
                return number
        return None

    def _update_action_state(self) -> None:
        loaded = self.app.policy_state.model is not None
        self.query_one("#add-number", Button).disabled = not loaded
        self.query_one("#delete-number", Button).disabled = self._current_row_key is None
        self.query_one("#clear-numbers", Button).disabled = not self._get_numbers()

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        row_key = event.row_key
        self._current_row_key = str(row_key.value) if hasattr(row_key, "value") else str(row_key)
        self._update_action_state()

    @on(Button.Pressed, "#add-number")
    def _on_add_number(self) -> None:
        self.app.push_screen(AddNumberScreen(), self._handle_add_number)

    def _handle_add_number(self, national: str | None) -> None:
        if not national:
            return
        self.app.apply_edit(lambda editor: editor.add_number(national, NumberSource.MANUAL)[0])

    @on(Button.Pressed, "#delete-number")
    def _on_delete_number(self) -> None:
        if self._current_row_key is None:
            return
        number = self._find_number(self._current_row_key)
        if number is None:
            return
        self.app.push_screen(DeleteNumberScreen(number.national_number), self._handle_delete_number)

    def _handle_delete_number(self, confirmed: bool | None) -> None:
        if not confirmed or self._current_row_key is None:
            return
        number_id = self._current_row_key
        self._current_row_key = None
        self.app.apply_edit(lambda editor: editor.remove_number(number_id))

    @on(Button.Pressed, "#clear-numbers")
    def _on_clear_numbers(self) -> None:
        self.app.push_screen(ClearNumbersScreen(), self._handle_clear_numbers)

    def _handle_clear_numbers(self, confirmed: bool | None) -> None:
        if not confirmed:
            return
        self._current_row_key = None
        self.app.apply_edit(lambda editor: editor.clear_numbers())

    @staticmethod
    def _source_label(source: NumberSource) -> str:
        return {
            NumberSource.CALL: "Call",
            NumberSource.TEXT: "Text",
            NumberSource.MANUAL: "Manual",
        }[source]
