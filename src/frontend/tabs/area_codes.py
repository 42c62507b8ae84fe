"""Area codes tab implementation."""

from __future__ import annotations

from typing import Any, Optional

from textual import on
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, DataTable, Input, Static

from core.classifier import FilterAction, decide
from core.enumerator import plan_call_blocking
from core.models import AreaCodeRule
from core.phone import area_code_of, format_national, normalize
from ..modals import AddAreaCodeScreen, DeleteAreaCodeScreen


class AreaCodesTab(Container):
    """Area codes tab for editing rules and testing senders against them."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._current_row_key: Optional[str] = None
        self._table_ready = False

    def compose(self):
        with Vertical(id="codes-panel"):
            with Horizontal(id="codes-body"):
                with Container(id="codes-left"):
                    yield DataTable(id="codes-table", cursor_type="row")
                with Container(id="codes-right"):
                    yield Static("Sender tester", id="codes-test-title")
                    yield Input(placeholder="Sender number in any format", id="codes-test-sender")
                    with Horizontal(id="codes-test-actions"):
                        yield Button("Test", id="codes-test", variant="primary")
                    yield Static("", id="codes-test-result")
                    yield Static("", id="codes-plan")
            with Horizontal(id="codes-actions"):
                yield Button("Add area code", id="add-code", variant="success")
                yield Button("Toggle calls", id="toggle-calls")
                yield Button("Toggle texts", id="toggle-texts")
                yield Button("Delete", id="delete-code", variant="error")

    def on_mount(self) -> None:
        table = self.query_one("#codes-table", DataTable)
        table.add_column("code", key="code", width=6)
        table.add_column("calls", key="calls", width=9)
        table.add_column("texts", key="texts", width=9)
        table.add_column("added", key="added", width=12)
        table.zebra_stripes = True
        self.query_one("#codes-test-actions").styles.height = 3
        self._table_ready = True
        self.reload_from_policy()

    def reload_from_policy(self) -> None:
        if not self._table_ready:
            return
        table = self.query_one("#codes-table", DataTable)
        table.clear()
        for rule in self._get_rules():
            table.add_row(
                rule.code,
                self._status_label(rule.block_calls),
                self._status_label(rule.block_texts),
                rule.created_at.strftime("%Y-%m-%d"),
                key=rule.id,
            )
        if self._current_row_key and self._find_rule(self._current_row_key) is None:
            self._current_row_key = None
        self._update_plan()
        self._update_action_state()

    def _get_rules(self) -> list[AreaCodeRule]:
        model = self.app.policy_state.model
        if model is None:
            return []
        return list(model.rules)

    def _find_rule(self, rule_id: str) -> Optional[AreaCodeRule]:
        for rule in self._get_rules():
            if rule.id == rule_id:
                return rule
        return None

    def _update_action_state(self) -> None:
        has_selection = self._current_row_key is not None
        for button_id in ("#toggle-calls", "#toggle-texts", "#delete-code"):
            self.query_one(button_id, Button).disabled = not has_selection
        self.query_one("#add-code", Button).disabled = self.app.policy_state.model is None

    def _update_plan(self) -> None:
        model = self.app.policy_state.model
        plan_label = self.query_one("#codes-plan", Static)
        if model is None:
            plan_label.update("")
            return
        plan = plan_call_blocking(model.snapshot)
        plan_label.update(
            f"Call blocking: {len(plan.area_codes)} area code(s), "
            f"{len(plan.extra_numbers)} extra number(s), {plan.entry_count:,} entries"
        )

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        self._current_row_key = self._coerce_row_key(event.row_key)
        self._update_action_state()

    @on(Button.Pressed, "#add-code")
    def _on_add_code(self) -> None:
        self.app.push_screen(AddAreaCodeScreen(), self._handle_add_code)

    def _handle_add_code(self, payload: dict[str, Any] | None) -> None:
        if not payload:
            return
        self.app.apply_edit(
            lambda editor: editor.add_rule(payload["code"], payload["block_calls"], payload["block_texts"])
        )

    @on(Button.Pressed, "#toggle-calls")
    def _on_toggle_calls(self) -> None:
        if self._current_row_key is None:
            return
        rule_id = self._current_row_key
        self.app.apply_edit(lambda editor: editor.toggle_rule(rule_id, calls=True))

    @on(Button.Pressed, "#toggle-texts")
    def _on_toggle_texts(self) -> None:
        if self._current_row_key is None:
            return
        rule_id = self._current_row_key
        self.app.apply_edit(lambda editor: editor.toggle_rule(rule_id, texts=True))

    @on(Button.Pressed, "#delete-code")
    def _on_delete_code(self) -> None:
        if self._current_row_key is None:
            return
        rule = self._find_rule(self._current_row_key)
        if rule is None:
            return
        self.app.push_screen(DeleteAreaCodeScreen(rule.code), self._handle_delete_code)

    def _handle_delete_code(self, confirmed: bool | None) -> None:
        if not confirmed or self._current_row_key is None:
            return
        rule_id = self._current_row_key
        self._current_row_key = None
        self.app.apply_edit(lambda editor: editor.remove_rule(rule_id))

    @on(Button.Pressed, "#codes-test")
    def _on_test_sender(self) -> None:
        sender = self.query_one("#codes-test-sender", Input).value
        result = self.query_one("#codes-test-result", Static)
        model = self.app.policy_state.model
        if not sender.strip():
            result.update("Enter a sender to test.")
            return
        if model is None:
            result.update("Policy not loaded.")
            return
        national = normalize(sender)
        if national is None:
            result.update("Not a North-American number: texts allowed.")
            return
        # Uses the live policy, not the classifier's cached copy.
        verdict = decide(sender, model.text_blocked_area_codes())
        area_code = area_code_of(national)
        texts = "junk" if verdict.action is FilterAction.JUNK else "allowed"
        calls = "blocked" if area_code in model.call_blocked_area_codes() else "allowed"
        result.update(f"{format_national(national)}\nTexts: {texts}\nCalls: {calls}")

    @staticmethod
    def _status_label(blocked: bool) -> str:
        return "Blocked" if blocked else "Allowed"

    @staticmethod
    def _coerce_row_key(value: Any) -> str:
        if hasattr(value, "value"):
            return str(value.value)
        return str(value)
