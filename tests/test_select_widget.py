"""In-process Textual tests for the FormSelect widget."""

import pytest
from rich.text import Text
from textual.widgets import Select as TextualSelect
from textual.widgets import Static

from formwidgets.core.config import SelectConfig
from formwidgets.core.scroll import SCROLL_TO_CORRECTION
from formwidgets.tui.menu import SelectMenu
from formwidgets.tui.scrolling import scroll_container
from formwidgets.tui.select import FormSelect, SelectButton
from tests.harness import MessageCapture, click_and_settle, press_and_settle, resize_and_settle, run_app

pytestmark = pytest.mark.textual

AB = [{"value": "a", "text": "A"}, {"value": "b", "text": "B"}]


def single(mode="radio", **kwargs):
    config = kwargs.pop("config", None) or SelectConfig(mode=mode, placeholder="Pick")
    return lambda: [FormSelect(AB, config=config, id="sel", **kwargs)]


async def focus_button(pilot, app) -> FormSelect:
    select = app.screen.query_one("#sel", FormSelect)
    select.button.focus()
    await pilot.pause()
    return select


async def test_placeholder_and_value_label():
    async with run_app(single(default_value=["b"])) as (pilot, app):
        select = app.screen.query_one("#sel", FormSelect)
        assert select.button.label_text == "B"
        assert select.form_value == "b"
        assert select.has_class("-mode-radio")
        assert not select.button.has_class("-placeholder")


async def test_keyboard_open_navigate_commit():
    capture = MessageCapture()
    async with run_app(single(), message_hook=capture) as (pilot, app):
        select = await focus_button(pilot, app)

        await press_and_settle(pilot, "enter")
        assert select.opened
        assert select.popup.is_open
        assert isinstance(app.screen.focused, SelectMenu)

        await press_and_settle(pilot, "down")
        await press_and_settle(pilot, "enter")

        assert select.value == ["b"]
        assert not select.opened
        assert not select.popup.is_open
        assert app.screen.focused is select.button
        assert [m.value for m in capture.of_type("Changed") if isinstance(m, FormSelect.Changed)] == [["b"]]
        toggles = [m.opened for m in capture.of_type("Toggled")]
        assert toggles == [True, False]


async def test_check_mode_stays_open_while_checking():
    async with run_app(single("check")) as (pilot, app):
        select = await focus_button(pilot, app)
        await press_and_settle(pilot, "enter")
        await press_and_settle(pilot, "space")
        await press_and_settle(pilot, "down")
        await press_and_settle(pilot, "space")
        assert select.value == ["a", "b"]
        assert select.opened
        assert isinstance(app.screen.focused, SelectMenu)
        assert select.button.label_text == "A, B"


async def test_escape_closes_and_returns_focus():
    async with run_app(single("check")) as (pilot, app):
        select = await focus_button(pilot, app)
        await press_and_settle(pilot, "enter")
        assert select.opened
        await press_and_settle(pilot, "escape")
        assert not select.opened
        assert app.screen.focused is select.button


async def test_click_button_then_outside():
    capture = MessageCapture()
    async with run_app(single(), message_hook=capture) as (pilot, app):
        select = app.screen.query_one("#sel", FormSelect)
        await click_and_settle(pilot, SelectButton)
        assert select.opened
        await click_and_settle(pilot, "#outside")
        assert not select.opened
        assert capture.of_type("ClickOutside")


async def test_disabling_an_open_select_closes_it():
    capture = MessageCapture()
    async with run_app(single(opened=True), message_hook=capture) as (pilot, app):
        select = app.screen.query_one("#sel", FormSelect)
        assert select.opened
        select.set_props(disabled=True)
        await pilot.pause()
        assert not select.opened
        assert select.has_class("-disabled")
        assert [m.opened for m in capture.of_type("Toggled")] == [False]


async def test_controlled_value_is_not_overwritten():
    capture = MessageCapture()
    async with run_app(single(value=["a"]), message_hook=capture) as (pilot, app):
        select = await focus_button(pilot, app)
        await press_and_settle(pilot, "enter")
        await press_and_settle(pilot, "down")
        await press_and_settle(pilot, "enter")
        assert select.value == ["a"]
        assert [m.value for m in capture.of_type("Changed") if isinstance(m, FormSelect.Changed)] == [["b"]]
        select.set_props(value=["b"])
        await pilot.pause()
        assert select.button.label_text == "B"


async def test_small_viewport_switches_to_native_list():
    async with run_app(single(), size=(50, 30)) as (pilot, app):
        select = app.screen.query_one("#sel", FormSelect)
        assert select.has_class("-native")
        assert select.popup is None

        select.native_select.choose_row(2)
        await pilot.pause()
        assert select.value == ["b"]

        await resize_and_settle(pilot, 120, 30)
        await pilot.pause(0.05)
        assert not select.has_class("-native")
        assert select.popup is not None
        assert select.menu.rows[1].item.value == "b"


async def test_popup_mode_on_small_viewport_keeps_panel():
    config = SelectConfig(mode="radio", mobile_menu_mode="popup", mobile_title="Choose")
    async with run_app(single(config=config), size=(50, 30)) as (pilot, app):
        select = await focus_button(pilot, app)
        assert select.popup is not None
        await press_and_settle(pilot, "enter")
        assert select.popup.is_open
        assert select.popup.has_class("-screen")
        assert isinstance(app.screen.focused, SelectMenu)


async def test_render_popup_on_focus_mounts_lazily():
    config = SelectConfig(mode="radio", render_popup_on_focus=True)
    async with run_app(single(config=config)) as (pilot, app):
        select = await focus_button(pilot, app)
        assert select.popup is None
        assert select.value == ["a"]

        await press_and_settle(pilot, "enter")
        await pilot.pause()
        assert select.popup is not None
        assert select.popup.is_open
        assert isinstance(app.screen.focused, SelectMenu)

        await press_and_settle(pilot, "escape")
        await pilot.pause()
        assert not select.opened
        assert select.popup is None


async def test_equal_popup_width_pins_popup_to_button():
    config = SelectConfig(mode="radio", equal_popup_width=True)
    async with run_app(single(config=config)) as (pilot, app):
        select = await focus_button(pilot, app)
        await press_and_settle(pilot, "enter")
        width = select.button.outer_size.width
        assert select.controller.popup_bounds.min_width == width
        assert select.controller.popup_bounds.max_width == width


async def test_tick_follows_opened_state():
    async with run_app(single()) as (pilot, app):
        select = await focus_button(pilot, app)
        assert select.button.label_content.plain == "Pick  ▾"
        await press_and_settle(pilot, "enter")
        assert select.button.label_content.plain == "Pick  ▴"


async def test_hide_tick_drops_the_arrow():
    config = SelectConfig(mode="radio", placeholder="Pick", hide_tick=True)
    async with run_app(single(config=config)) as (pilot, app):
        select = await focus_button(pilot, app)
        assert select.has_class("-no-tick")
        assert select.button.label_content.plain == "Pick"
        await press_and_settle(pilot, "enter")
        assert select.opened
        assert select.button.label_content.plain == "Pick"


async def test_custom_button_content_renders_on_the_anchor():
    config = SelectConfig(
        mode="check",
        render_button_content=lambda items: Text(f"{len(items)} picked", style="bold"),
    )
    async with run_app(single(config=config, default_value=["a", "b"])) as (pilot, app):
        select = app.screen.query_one("#sel", FormSelect)
        assert select.button.label_text == "2 picked"
        assert not select.button.has_class("-placeholder")

        await focus_button(pilot, app)
        await press_and_settle(pilot, "enter")
        await press_and_settle(pilot, "space")
        assert select.value == ["b"]
        assert select.button.label_text == "1 picked"


async def test_scroll_to_field_leaves_a_row_above():
    def compose():
        rows = [Static(f"row {i}") for i in range(40)]
        tail = [Static(f"tail {i}") for i in range(40)]
        return [*rows, FormSelect(AB, config=SelectConfig(mode="radio"), id="sel"), *tail]

    async with run_app(compose) as (pilot, app):
        select = app.screen.query_one("#sel", FormSelect)
        container = scroll_container(select)
        assert container.scroll_y == 0
        select.scroll_to_field()
        await pilot.pause(0.5)
        assert container.scroll_y > 0
        assert select.region.y - container.content_region.y == SCROLL_TO_CORRECTION


def test_messages_do_not_share_handlers_with_textual_select():
    assert FormSelect.Changed.handler_name == "on_form_select_changed"
    assert FormSelect.Toggled.handler_name == "on_form_select_toggled"
    assert FormSelect.Changed.handler_name != TextualSelect.Changed.handler_name
