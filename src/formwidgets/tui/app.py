"""Demo application hosting every form widget on one screen.

The event log at the bottom shows what each widget reports to its host.
"""

from __future__ import annotations

import logging
from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widgets import Footer, Header, Log

from formwidgets.core.config import SelectConfig
from formwidgets.core.viewport import ViewportQuery
from formwidgets.tui.screens import FormScreen
from formwidgets.tui.select import FormSelect
from formwidgets.tui.text_input import TextInput
from formwidgets.tui.textarea import Textarea
from formwidgets.tui.toggle import Toggle

logger = logging.getLogger(__name__)

DEMO_OPTIONS: list[dict[str, Any]] = [
    {"value": "01", "text": "Facebook"},
    {"value": "02", "text": "Twitter"},
    {"value": "03", "text": "LinkedIn"},
    {"value": "04", "text": "Google+"},
    {"value": "05", "text": "Skype"},
    {"value": "06", "text": "Vkontakte", "checkedText": "VK"},
]

DEMO_GROUPS: list[dict[str, Any]] = [
    {
        "type": "group",
        "title": "Messengers",
        "content": [
            {"value": "skype", "text": "Skype"},
            {"value": "telegram", "text": "Telegram"},
        ],
    },
    {
        "type": "group",
        "title": "Networks",
        "content": [
            {"value": "fb", "text": "Facebook"},
            {"value": "vk", "text": "Vkontakte"},
        ],
    },
]


class DemoScreen(FormScreen):
    DEFAULT_CSS = """
    DemoScreen VerticalScroll {
        padding: 1 2;
    }
    DemoScreen FormSelect, DemoScreen TextInput, DemoScreen Textarea, DemoScreen Toggle {
        margin-bottom: 1;
    }
    DemoScreen Log {
        height: 8;
        border: round $primary-muted;
    }
    """

    def __init__(
        self,
        *,
        mode: str = "check",
        mobile_menu_mode: str = "native",
        small_width: int | None = None,
        render_popup_on_focus: bool = False,
    ) -> None:
        super().__init__()
        self._mode = mode
        self._mobile_menu_mode = mobile_menu_mode
        self._query = ViewportQuery(max_width=small_width) if small_width else ViewportQuery()
        self._render_popup_on_focus = render_popup_on_focus

    def compose(self) -> ComposeResult:
        yield Header()
        with VerticalScroll():
            yield FormSelect(
                DEMO_OPTIONS,
                config=SelectConfig(
                    mode=self._mode,
                    label="Social network",
                    placeholder="Choose one or more",
                    hint="Flat option list",
                    mobile_menu_mode=self._mobile_menu_mode,
                    render_popup_on_focus=self._render_popup_on_focus,
                ),
                viewport_query=self._query,
                name="networks",
                id="networks",
            )
            yield FormSelect(
                DEMO_GROUPS,
                config=SelectConfig(
                    mode="radio",
                    label="Grouped",
                    group_view="line",
                    equal_popup_width=True,
                    mobile_menu_mode=self._mobile_menu_mode,
                ),
                viewport_query=self._query,
                name="grouped",
                id="grouped",
            )
            yield TextInput(label="Name", placeholder="Your name", clear=True, id="name")
            yield Textarea(label="Comment", max_rows=6, id="comment")
            yield Toggle("Subscribe", value="yes", id="subscribe")
            yield Log(id="events")
        yield Footer()

    def _log(self, line: str) -> None:
        logger.info(line)
        self.query_one("#events", Log).write_line(line)

    def on_form_select_changed(self, event: FormSelect.Changed) -> None:
        self._log(f"{event.select.id}: value={event.value} form={event.select.form_value!r}")

    def on_form_select_toggled(self, event: FormSelect.Toggled) -> None:
        self._log(f"{event.select.id}: opened={event.opened}")

    def on_form_select_click_outside(self, event: FormSelect.ClickOutside) -> None:
        self._log(f"{event.select.id}: click outside")

    def on_text_input_changed(self, event: TextInput.Changed) -> None:
        self._log(f"{event.text_input.id}: {event.value!r}")

    def on_textarea_changed(self, event: Textarea.Changed) -> None:
        self._log(f"{event.textarea.id}: {len(event.value)} chars")

    def on_toggle_changed(self, event: Toggle.Changed) -> None:
        self._log(f"{event.toggle.id}: checked={event.checked} value={event.value!r}")


class FormDemoApp(App):
    TITLE = "formwidgets"
    SUB_TITLE = "form widget demo"

    BINDINGS = [
        Binding("ctrl+d", "toggle_disabled", "Disable select"),
        Binding("ctrl+q", "quit", "Quit", priority=True),
    ]

    def __init__(self, **screen_options: Any) -> None:
        super().__init__()
        self._screen_options = screen_options

    def get_default_screen(self) -> DemoScreen:
        return DemoScreen(**self._screen_options)

    def action_toggle_disabled(self) -> None:
        select = self.screen.query_one("#networks", FormSelect)
        select.set_props(disabled=not select.disabled)
