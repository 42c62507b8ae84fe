"""Modal dialogs for the Textual policy panel."""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static, Switch

from core.phone import format_national
from .validators import parse_area_code, parse_phone_number


class AddAreaCodeScreen(ModalScreen[dict[str, Any] | None]):
    """Modal form for adding a blocked area code."""

    def compose(self) -> ComposeResult:
        yield Container(
            Static("Add area code", classes="modal-title"),
            Static("", id="add-code-error", classes="modal-error"),
            Static("area code", classes="form-label"),
            Input(placeholder="3-digit area code", id="add-code", max_length=3),
            Static("block calls", classes="form-label"),
            Switch(value=True, id="add-block-calls"),
            Static("block texts", classes="form-label"),
            Switch(value=True, id="add-block-texts"),
            Horizontal(
                Button("Add", id="add-code-confirm", variant="success"),
                Button("Cancel", id="add-code-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--form",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "add-code-cancel":
            self.dismiss(None)
            return
        if event.button.id != "add-code-confirm":
            return
        info = parse_area_code(self.query_one("#add-code", Input).value)
        block_calls = bool(self.query_one("#add-block-calls", Switch).value)
        block_texts = bool(self.query_one("#add-block-texts", Switch).value)
        error = self.query_one("#add-code-error", Static)
        if info.error or info.normalized is None:
            error.update(info.error or "invalid area code")
            return
        if not block_calls and not block_texts:
            error.update("block calls, texts, or both")
            return
        self.dismiss({"code": info.normalized, "block_calls": block_calls, "block_texts": block_texts})


class AddNumberScreen(ModalScreen[str | None]):
    """Modal form for blocking a single number by hand."""

    def compose(self) -> ComposeResult:
        yield Container(
            Static("Block number", classes="modal-title"),
            Static("", id="add-number-error", classes="modal-error"),
            Static("phone number", classes="form-label"),
            Input(placeholder="(206) 555-1234", id="add-number"),
            Horizontal(
                Button("Block", id="add-number-confirm", variant="success"),
                Button("Cancel", id="add-number-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--form",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "add-number-cancel":
            self.dismiss(None)
            return
        if event.button.id != "add-number-confirm":
            return
        info = parse_phone_number(self.query_one("#add-number", Input).value)
        if info.error or info.normalized is None:
            self.query_one("#add-number-error", Static).update(info.error or "invalid number")
            return
        self.dismiss(info.normalized)


class DeleteAreaCodeScreen(ModalScreen[bool]):
    """Confirm deletion of an area code rule."""

    def __init__(self, code: str) -> None:
        super().__init__()
        self._code = code

    def compose(self) -> ComposeResult:
        yield Container(
            Static("Delete area code?", classes="modal-title"),
            Static(self._code, classes="modal-body"),
            Horizontal(
                Button("Delete", id="delete-code-confirm", variant="error"),
                Button("Cancel", id="delete-code-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--confirm",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "delete-code-confirm":
            self.dismiss(True)
        else:
            self.dismiss(False)


class DeleteNumberScreen(ModalScreen[bool]):
    """Confirm removal of one blocked number."""

    def __init__(self, national_number: str) -> None:
        super().__init__()
        self._label = format_national(national_number)

    def compose(self) -> ComposeResult:
        yield Container(
            Static("Unblock number?", classes="modal-title"),
            Static(self._label, classes="modal-body"),
            Horizontal(
                Button("Unblock", id="delete-number-confirm", variant="error"),
                Button("Cancel", id="delete-number-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--confirm",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "delete-number-confirm":
            self.dismiss(True)
        else:
            self.dismiss(False)


class ClearNumbersScreen(ModalScreen[bool]):
    """Confirm clearing every individually blocked number."""

    def compose(self) -> ComposeResult:
        yield Container(
            Static("Clear all blocked numbers?", classes="modal-title"),
            Static(
                "This will remove all individually blocked phone numbers. "
                "Area code blocking rules will remain.",
                classes="modal-body",
            ),
            Horizontal(
                Button("Clear all", id="clear-confirm", variant="error"),
                Button("Cancel", id="clear-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--confirm",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "clear-confirm":
            self.dismiss(True)
        else:
            self.dismiss(False)
