"""Main Textual app for the areablock policy panel."""

from __future__ import annotations

from typing import Any, Callable

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Center, Container, Horizontal, Vertical
from textual.widgets import Button, ContentSwitcher, Footer, Static, Tab, Tabs

from core.editor import PolicyEditor
from core.errors import PolicyEditError, StoreUnavailable
from core.policy import PolicyModel
from core.repository import PolicyRepository
from .constants import ALLOW_GREEN, BLOCK_RED
from .state import PolicyState
from .tabs.area_codes import AreaCodesTab
from .tabs.guide import GuideTab
from .tabs.numbers import NumbersTab


class PolicyPanelApp(App):
    """Policy panel; every edit is written to the store immediately."""

    BINDINGS = [
        ("ctrl+r", "reload_policy", "Reload"),
        ("q", "quit", "Quit"),
        ("ctrl+c", "quit", "Quit"),
    ]

    CSS = """
    Screen {
        background: #1a1214;
        color: #f2e8e9;
    }

    #header {
        height: 7;
        padding: 1 4;
        border-bottom: solid #46353a;
    }

    #header-left, #header-right {
        width: 1fr;
    }

    #header-right {
        content-align: right top;
        text-align: right;
    }

    #title {
        text-style: bold;
    }

    .subtle {
        color: #d8c6c9;
    }

    .status-loaded {
        color: #46A758;
    }

    .status-error {
        color: #E5484D;
    }

    #tabs-bar {
        height: 5;
        padding: 0 4;
        border-bottom: solid #46353a;
    }

    #tabs-center {
        width: 100%;
        height: 4;
    }

    #tabs {
        width: auto;
    }

    #codes-left {
        width: 2fr;
    }

    #codes-right {
        width: 1fr;
        padding: 0 2;
    }

    #codes-actions, #numbers-actions {
        height: 3;
    }

    .modal-dialog {
        width: 60;
        height: auto;
        padding: 1 2;
        border: thick #46353a;
        background: #241a1c;
    }

    .modal-title {
        text-style: bold;
    }

    .modal-error {
        color: #E5484D;
    }

    .guide {
        padding: 1 4;
    }
    """

    def __init__(self, repository: PolicyRepository, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.editor = PolicyEditor(repository)
        self.policy_state = PolicyState()

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            with Horizontal(id="header-row"):
                with Vertical(id="header-left"):
                    yield Static(self._title_text(), id="title")
                    yield Static("calls + texts", classes="subtle")
                with Vertical(id="header-right"):
                    yield Static("", id="header-status")
                    yield Static("", id="header-message", classes="subtle")
                    yield Horizontal(Button("Reload", id="reload-btn"), id="header-actions")

        with Container(id="tabs-bar"):
            with Center(id="tabs-center"):
                yield Tabs(
                    Tab("Area codes", id="codes"),
                    Tab("Blocked numbers", id="numbers"),
                    Tab("Guide", id="guide"),
                    id="tabs",
                )

        with ContentSwitcher(id="content"):
            yield AreaCodesTab(id="codes")
            yield NumbersTab(id="numbers")
            yield GuideTab(id="guide")
        yield Footer()

    def on_mount(self) -> None:
        self._load_policy()
        self._set_active_tab("codes")

    def on_tabs_tab_activated(self, event: Tabs.TabActivated) -> None:
        tab_id = event.tab.id or ""
        if tab_id:
            self._set_active_tab(tab_id)

    def _set_active_tab(self, tab_id: str) -> None:
        switcher = self.query_one("#content", ContentSwitcher)
        switcher.current = tab_id

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "reload-btn":
            self.action_reload_policy()

    def action_reload_policy(self) -> None:
        self._load_policy()

    def _load_policy(self) -> None:
        try:
            self.policy_state.model = self.editor.load()
            self.policy_state.error = None
        except StoreUnavailable as exc:
            self.policy_state.model = None
            self.policy_state.error = f"store error: {exc}"
        self._refresh()

    def apply_edit(self, edit: Callable[[PolicyEditor], PolicyModel]) -> None:
        """Run one editor operation and refresh every tab from its result."""

        message = ""
        try:
            self.policy_state.model = edit(self.editor)
            self.policy_state.error = None
        except PolicyEditError as exc:
            message = str(exc)
        except StoreUnavailable as exc:
            self.policy_state.error = f"store error: {exc}"
        self._refresh(message)

    def _refresh(self, message: str = "") -> None:
        status = self.query_one("#header-status", Static)
        status.remove_class("status-loaded", "status-error")
        if self.policy_state.error:
            status.update("policy: error")
            status.add_class("status-error")
            message = message or self.policy_state.error
        else:
            status.update("policy: saved")
            status.add_class("status-loaded")
        self.query_one("#header-message", Static).update(message)

        for tab in self.query(AreaCodesTab):
            tab.reload_from_policy()
        for tab in self.query(NumbersTab):
            tab.reload_from_policy()

    @staticmethod
    def _title_text() -> Text:
        return Text.assemble(
            ("AREA", BLOCK_RED),
            ("BLOCK", ALLOW_GREEN),
            (" > Policy Panel", "bold"),
        )
